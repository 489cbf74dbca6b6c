#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
评估指标
用小规模网络的枚举结果检验采样推断的准确性
"""
import itertools
import pandas as pd
import numpy as np
from typing import Dict, Optional, Sequence
from scipy.stats import chisquare

from sbn.bayes.assignment import Assignment
from sbn.bayes.sampling import joint_probability
from sbn.utils.logging import setup_logger

logger = setup_logger("metrics")


def enumerate_posterior(network, name: str, evidence: Optional[Assignment] = None) -> Dict[str, float]:
    """
    枚举所有非证据变量的组合，计算精确后验（仅适用于小规模网络）

    Args:
        network: Network对象
        name: 查询变量名
        evidence: 证据，None 表示使用网络当前的证据

    Returns:
        状态到后验概率的映射
    """
    target = network.get_node(name)
    evidence = network.evidence if evidence is None else evidence
    variables = network.nodes

    observed = Assignment({k: v for k, v in evidence.items() if k in network})
    hidden = [v for v in variables if not observed.has(v.name)]

    totals = {state: 0.0 for state in target.states}
    for values in itertools.product(*[v.states for v in hidden]):
        event = observed.copy()
        for variable, state in zip(hidden, values):
            event.set(variable.name, state)

        joint = joint_probability(variables, event)
        state = event.get_state(name)
        if state in totals:
            totals[state] += joint

    magnitude = sum(totals.values())
    if magnitude <= 0.0:
        raise ValueError(f"证据的概率为0，无法计算后验: {observed}")

    return {state: value / magnitude for state, value in totals.items()}


def _aligned(p: Dict[str, float], q: Dict[str, float]):
    states = list(dict.fromkeys(list(p) + list(q)))
    left = np.array([p.get(s, 0.0) for s in states], dtype=float)
    right = np.array([q.get(s, 0.0) for s in states], dtype=float)
    return left, right


def total_variation_distance(p: Dict[str, float], q: Dict[str, float]) -> float:
    """总变差距离 0.5 * Σ|p - q|"""
    left, right = _aligned(p, q)
    return float(0.5 * np.abs(left - right).sum())


def max_absolute_error(p: Dict[str, float], q: Dict[str, float]) -> float:
    """各状态概率差的最大绝对值"""
    left, right = _aligned(p, q)
    return float(np.abs(left - right).max()) if len(left) else 0.0


def chi_square_test(samples: Sequence[str], expected: Dict[str, float]) -> Dict:
    """
    卡方拟合优度检验

    Args:
        samples: 抽样得到的状态序列
        expected: 理论分布（状态到概率）

    Returns:
        包含统计量、p值和观测/期望频数的字典
    """
    states = list(expected)
    observed = pd.Series(list(samples), dtype=object).value_counts().reindex(states, fill_value=0)
    n = int(observed.sum())

    probs = np.array([expected[s] for s in states], dtype=float)
    probs = probs / probs.sum()
    expected_counts = probs * n

    # 期望为0的状态不参与检验；若这些状态被抽到，则分布必然不符
    support = expected_counts > 0
    unexpected = int(observed.values[~support].sum()) + (len(samples) - n)
    if unexpected > 0:
        logger.warning(f"样本中出现 {unexpected} 个理论概率为0的状态")
        return {
            'statistic': float('inf'),
            'p_value': 0.0,
            'observed': observed.to_dict(),
            'expected': dict(zip(states, expected_counts.tolist()))
        }

    statistic, p_value = chisquare(observed.values[support], expected_counts[support])

    return {
        'statistic': float(statistic),
        'p_value': float(p_value),
        'observed': observed.to_dict(),
        'expected': dict(zip(states, expected_counts.tolist()))
    }


def evaluate_posterior(estimated: Dict[str, float], reference: Dict[str, float]) -> Dict[str, float]:
    """
    比较采样后验与参考后验

    Args:
        estimated: 采样得到的后验
        reference: 参考（精确）后验

    Returns:
        指标字典
    """
    metrics = {
        'total_variation_distance': total_variation_distance(estimated, reference),
        'max_absolute_error': max_absolute_error(estimated, reference),
    }
    logger.info(f"后验评估 - TVD: {metrics['total_variation_distance']:.4f}, "
                f"最大误差: {metrics['max_absolute_error']:.4f}")
    return metrics
