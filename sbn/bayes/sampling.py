#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
近似推断
通过重复采样估计查询变量的后验分布，支持MCMC（Markov Blanket Gibbs采样）、
拒绝采样和似然加权三种方式
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from tqdm import tqdm

from sbn.bayes.assignment import Assignment
from sbn.bayes.errors import InvalidStateError, SamplingError
from sbn.bayes.variable import Variable
from sbn.utils.logging import setup_logger

logger = setup_logger("bayes_sampling")

DEFAULT_SAMPLE_COUNT = 1000


class InferenceMode(Enum):
    """推断方式"""
    MCMC = "mcmc"
    REJECTION_SAMPLING = "rejection"
    LIKELIHOOD_WEIGHTING = "likelihood_weighting"


@dataclass
class InferenceConfig:
    """
    推断参数

    Attributes:
        sample_count: 计入结果的样本数
        mode: 推断方式
        burn_in: MCMC丢弃的预热轮数
        seed: 随机种子，None 表示不固定
        max_attempts_factor: 拒绝采样最多尝试 sample_count 的多少倍
        show_progress: 是否显示进度条
    """
    sample_count: int = DEFAULT_SAMPLE_COUNT
    mode: InferenceMode = InferenceMode.MCMC
    burn_in: int = 100
    seed: Optional[int] = None
    max_attempts_factor: int = 100
    show_progress: bool = False

    def __post_init__(self):
        if not isinstance(self.mode, InferenceMode):
            try:
                self.mode = InferenceMode(str(self.mode).lower())
            except ValueError:
                choices = [m.value for m in InferenceMode]
                raise ValueError(f"未知的推断方式: {self.mode}，可选: {choices}") from None

        if self.sample_count <= 0:
            raise ValueError(f"样本数必须为正数: {self.sample_count}")
        if self.burn_in < 0:
            raise ValueError(f"预热轮数不能为负数: {self.burn_in}")
        if self.max_attempts_factor <= 0:
            raise ValueError(f"最大尝试倍数必须为正数: {self.max_attempts_factor}")

    @classmethod
    def from_dict(cls, section: Optional[Dict[str, Any]]) -> 'InferenceConfig':
        """
        从配置字典（config.yaml 的 inference 部分）创建

        Args:
            section: 配置字典

        Returns:
            InferenceConfig对象
        """
        section = section or {}
        known = {name for name in cls.__dataclass_fields__}
        unknown = set(section) - known
        if unknown:
            logger.warning(f"忽略未知的推断配置项: {sorted(unknown)}")
        return cls(**{k: v for k, v in section.items() if k in known})


def forward_sample(
    variables: Sequence[Variable],
    event: Assignment,
    rng: np.random.Generator
) -> List[Variable]:
    """
    祖先采样：为 event 中尚未赋值的变量依次抽取状态

    反复遍历变量，父节点都已赋值的变量先被采样，直到所有变量都有状态。

    Args:
        variables: 网络中的全部变量
        event: 当前赋值（原地补全）
        rng: 随机数生成器

    Returns:
        按采样顺序排列的变量

    Raises:
        SamplingError: 某些变量的父节点永远无法赋值（存在环或父节点不在网络中）
    """
    pending = [v for v in variables if not event.has(v.name)]
    order = []

    while pending:
        remaining = []
        for variable in pending:
            if variable.can_be_evaluated(event):
                event.set(variable.name, variable.get_random_state(event, rng))
                order.append(variable)
            else:
                remaining.append(variable)

        if len(remaining) == len(pending):
            names = [v.name for v in remaining]
            raise SamplingError(f"无法确定采样顺序，以下变量的父节点无法赋值: {names}")
        pending = remaining

    return order


def joint_probability(variables: Sequence[Variable], event: Assignment) -> float:
    """
    完整赋值的联合概率：每个变量在其父节点状态下的边际概率之积

    Args:
        variables: 网络中的全部变量
        event: 包含所有变量状态的赋值

    Returns:
        联合概率
    """
    joint = 1.0
    for variable in variables:
        joint *= variable.evaluate_marginal(event.get_state(variable.name), event)
        if joint == 0.0:
            break
    return joint


def _check_evidence_states(variables: Sequence[Variable], evidence: Assignment) -> None:
    """证据中的状态必须是对应变量声明过的状态"""
    by_name = {v.name: v for v in variables}
    for name, state in evidence.items():
        if state not in by_name[name].states:
            raise InvalidStateError(name, state)


def tally_states(
    states: Sequence[str],
    samples: Sequence[str],
    weights: Optional[Sequence[float]] = None
) -> Dict[str, float]:
    """
    统计样本并归一化

    Args:
        states: 变量声明的全部状态
        samples: 每个样本中查询变量的状态
        weights: 样本权重，None 表示等权

    Returns:
        状态到概率的映射，未出现的状态概率为0
    """
    if weights is None:
        weights = np.ones(len(samples))

    series = pd.Series(list(weights), index=pd.Index(list(samples), dtype=object), dtype=float)
    totals = series.groupby(level=0).sum().reindex(list(states), fill_value=0.0)

    magnitude = totals.sum()
    if magnitude <= 0.0:
        raise SamplingError("所有样本的权重为0，无法归一化")

    return {state: float(prob) for state, prob in (totals / magnitude).items()}


def _initial_chain_state(
    variables: Sequence[Variable],
    evidence: Assignment,
    config: InferenceConfig,
    rng: np.random.Generator
) -> Tuple[Assignment, List[Variable]]:
    """
    为马尔可夫链寻找与证据一致的起点

    固定证据做祖先采样，直到完整赋值的联合概率大于0；
    概率为0的起点上所有Markov Blanket得分都为0，链会一直停在原地。

    Returns:
        (起始赋值, 非证据变量的采样顺序)

    Raises:
        SamplingError: 在 sample_count × max_attempts_factor 次尝试内没有找到起点
    """
    max_attempts = config.sample_count * config.max_attempts_factor
    for attempt in range(1, max_attempts + 1):
        working = evidence.copy()
        order = forward_sample(variables, working, rng)
        if joint_probability(variables, working) > 0.0:
            logger.debug(f"第 {attempt} 次尝试得到马尔可夫链起点: {working}")
            return working, order

    raise SamplingError(f"尝试 {max_attempts} 次后没有找到与证据一致的起点: {evidence}")


def _sample_mcmc(
    variables: Sequence[Variable],
    evidence: Assignment,
    target: Variable,
    config: InferenceConfig,
    rng: np.random.Generator
) -> Tuple[List[str], Optional[List[float]]]:
    working, order = _initial_chain_state(variables, evidence, config, rng)

    samples = []
    sweeps = config.burn_in + config.sample_count
    for sweep in tqdm(range(sweeps), desc=f"MCMC采样 {target.name}", disable=not config.show_progress):
        for variable in order:
            working.set(variable.name, variable.get_random_state_with_markov_blanket(working, rng))
        if sweep == config.burn_in and joint_probability(variables, working) <= 0.0:
            raise SamplingError(f"预热结束后马尔可夫链仍处于概率为0的状态: {working}")
        if sweep >= config.burn_in:
            samples.append(working.get_state(target.name))

    return samples, None


def _sample_rejection(
    variables: Sequence[Variable],
    evidence: Assignment,
    target: Variable,
    config: InferenceConfig,
    rng: np.random.Generator
) -> Tuple[List[str], Optional[List[float]]]:
    samples = []
    attempts = 0
    max_attempts = config.sample_count * config.max_attempts_factor

    with tqdm(total=config.sample_count, desc=f"拒绝采样 {target.name}",
              disable=not config.show_progress) as progress:
        while len(samples) < config.sample_count and attempts < max_attempts:
            attempts += 1
            working = Assignment()
            forward_sample(variables, working, rng)
            if working.matches(evidence):
                samples.append(working.get_state(target.name))
                progress.update(1)

    if not samples:
        raise SamplingError(f"尝试 {attempts} 次后没有样本与证据一致: {evidence}")
    if len(samples) < config.sample_count:
        logger.warning(f"拒绝采样只接受了 {len(samples)}/{config.sample_count} 个样本（共尝试 {attempts} 次）")
    else:
        logger.debug(f"拒绝采样接受率: {len(samples) / attempts:.4f}")

    return samples, None


def _sample_likelihood_weighting(
    variables: Sequence[Variable],
    evidence: Assignment,
    target: Variable,
    config: InferenceConfig,
    rng: np.random.Generator
) -> Tuple[List[str], Optional[List[float]]]:
    observed = [v for v in variables if evidence.has(v.name)]
    samples = []
    weights = []

    for _ in tqdm(range(config.sample_count), desc=f"似然加权 {target.name}",
                  disable=not config.show_progress):
        working = evidence.copy()
        forward_sample(variables, working, rng)

        weight = 1.0
        for variable in observed:
            weight *= variable.evaluate_marginal(evidence.get_state(variable.name), working)

        samples.append(working.get_state(target.name))
        weights.append(weight)

    return samples, weights


_SAMPLERS = {
    InferenceMode.MCMC: _sample_mcmc,
    InferenceMode.REJECTION_SAMPLING: _sample_rejection,
    InferenceMode.LIKELIHOOD_WEIGHTING: _sample_likelihood_weighting,
}


def run_query(
    variables: Sequence[Variable],
    evidence: Assignment,
    target: Variable,
    config: Optional[InferenceConfig] = None
) -> Dict[str, float]:
    """
    估计 target 在给定证据下的后验分布

    Args:
        variables: 网络中的全部变量
        evidence: 证据（不会被修改）
        target: 查询变量
        config: 推断参数

    Returns:
        target 每个声明状态的后验概率
    """
    config = config or InferenceConfig()
    rng = np.random.default_rng(config.seed)

    # 只保留网络中存在的变量
    names = {v.name for v in variables}
    relevant = Assignment({name: state for name, state in evidence.items() if name in names})
    _check_evidence_states(variables, relevant)

    logger.info(f"查询 {target.name}: 方式={config.mode.value}, 样本数={config.sample_count}, "
                f"证据=[{relevant}]")

    samples, weights = _SAMPLERS[config.mode](variables, relevant, target, config, rng)
    result = tally_states(target.states, samples, weights)

    logger.info(f"查询完成: {target.name} -> {result}")
    return result
