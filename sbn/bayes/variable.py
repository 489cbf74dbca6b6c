#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络随机变量
包含状态空间、父子关系、条件概率表，以及边际概率和Markov Blanket的计算
"""
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence

import numpy as np

from sbn.bayes.assignment import Assignment
from sbn.bayes.errors import (
    InvalidStateError,
    MarginalUnavailableError,
    StatelessVariableError,
)
from sbn.utils.logging import setup_logger

logger = setup_logger("bayes_variable")


class CombinationStep(Enum):
    """next_combination 的推进结果"""
    ADVANCED = "advanced"        # 正常推进到下一个组合
    WRAPPED_ALL = "wrapped_all"  # 变量自身状态回绕，枚举回到起点


def _inverse_cdf(states: Sequence[str], weights: Sequence[float], draw: float) -> str:
    """
    逆累积分布采样

    返回第一个累积概率超过 draw 的状态；浮点误差导致没有状态被选中时返回最后一个状态。
    """
    cumulative = np.cumsum(np.asarray(weights, dtype=float))
    index = int(np.searchsorted(cumulative, draw, side='right'))
    return states[min(index, len(states) - 1)]


class Variable:
    """
    离散随机变量

    Attributes:
        name: 变量名
        states: 可能的取值，声明顺序决定枚举和采样顺序
        parents: 父节点（按添加顺序）
        children: 子节点（按添加顺序）
        probabilities: 条件概率表，键为完整赋值（自身状态 + 父节点状态）
    """

    def __init__(self, name: str = "", naming=None):
        """
        初始化变量

        Args:
            name: 变量名，为空时由命名上下文生成
            naming: NamingContext对象
        """
        if not name:
            if naming is None:
                raise ValueError("未指定变量名时必须提供命名上下文")
            name = naming.next_variable_name()
        self.name = name
        self.states: List[str] = []
        self.parents: List['Variable'] = []
        self.children: List['Variable'] = []
        self.probabilities: Dict[Assignment, float] = {}

    def __repr__(self) -> str:
        return f"Variable({self.name!r}, states={self.states})"

    # ============ 网络构建 ============

    def add_state(self, name: str) -> None:
        """添加一个可能的状态（不检查重复）"""
        self.states.append(name)

    def add_child(self, child: 'Variable') -> None:
        """
        添加子节点，同时把自身登记为子节点的父节点

        Args:
            child: 子节点
        """
        if child is self:
            return
        self.children.append(child)
        child.parents.append(self)
        logger.debug(f"添加边: {self.name} -> {child.name}")

    def add_parent(self, parent: 'Variable') -> None:
        """
        添加父节点，同时把自身登记为父节点的子节点

        Args:
            parent: 父节点
        """
        if parent is self:
            return
        self.parents.append(parent)
        parent.children.append(self)
        logger.debug(f"添加边: {parent.name} -> {self.name}")

    def set_probability(self, assignment: Assignment, prob: float) -> None:
        """
        设置一个组合的概率

        概率表不做归一化检查，各状态之和是否为1由调用方保证。

        Args:
            assignment: 自身状态及父节点状态构成的赋值
            prob: 概率值
        """
        self.probabilities[assignment.copy()] = float(prob)

    def get_probability(self, assignment: Assignment) -> float:
        """查询概率表中的条目，不存在时返回0"""
        return self.probabilities.get(assignment, 0.0)

    # ============ 组合枚举 ============

    def _step_state(self, assignment: Assignment) -> bool:
        """
        把赋值中自身的状态推进到下一个

        Returns:
            是否回绕到第一个状态
        """
        if not self.states:
            raise StatelessVariableError(self.name)

        current = assignment.get_state(self.name)
        try:
            index = self.states.index(current)
        except ValueError:
            raise InvalidStateError(self.name, current) from None

        index += 1
        wrapped = index == len(self.states)
        if wrapped:
            index = 0
        assignment.set(self.name, self.states[index])
        return wrapped

    def advance_combination(self, assignment: Assignment) -> CombinationStep:
        """
        按里程表规则推进赋值

        最后添加的父节点变化最快，回绕时向前一个父节点进位；
        所有父节点都回绕（或没有父节点）时推进变量自身的状态。

        Args:
            assignment: 包含自身和所有父节点状态的赋值（原地修改）

        Returns:
            CombinationStep
        """
        carry = True
        index = len(self.parents) - 1
        while carry and index >= 0:
            carry = self.parents[index]._step_state(assignment)
            index -= 1

        if not carry:
            return CombinationStep.ADVANCED

        if self._step_state(assignment):
            return CombinationStep.WRAPPED_ALL
        return CombinationStep.ADVANCED

    def next_combination(self, assignment: Assignment) -> Assignment:
        """
        推进到下一个组合并返回同一个赋值对象

        以两个父节点为例（状态均为T/F），从 (自身, 父1, 父2) = (T, T, T) 开始依次得到:
        (T, T, F), (T, F, T), (T, F, F), (F, T, T), (F, T, F), (F, F, T), (F, F, F)，
        然后回到 (T, T, T)。
        """
        self.advance_combination(assignment)
        return assignment

    def combination_count(self) -> int:
        """自身状态数与所有父节点状态数的乘积"""
        count = len(self.states)
        for parent in self.parents:
            count *= len(parent.states)
        return count

    def iter_combinations(self, start: Assignment) -> Iterator[Assignment]:
        """
        从 start 开始遍历所有组合，每个组合恰好出现一次

        Args:
            start: 起始赋值（不会被修改）

        Yields:
            每个组合的副本
        """
        current = start.copy()
        for _ in range(self.combination_count()):
            yield current.copy()
            self.advance_combination(current)

    # ============ 概率计算 ============

    def can_be_evaluated(self, evidence: Assignment) -> bool:
        """所有父节点的状态都已出现在证据中"""
        return all(evidence.has(parent.name) for parent in self.parents)

    def evaluate_marginal(self, state: str, evidence: Assignment) -> float:
        """
        计算给定父节点证据时变量处于 state 的概率

        先保留自身状态为 state 的条目，再按每个父节点的证据状态过滤，
        剩余条目的概率之和即为边际概率（概率表中更细粒度的条目在此被求和消去）。

        Args:
            state: 变量状态
            evidence: 证据，必须包含所有父节点的状态

        Returns:
            边际概率

        Raises:
            MarginalUnavailableError: 证据缺少某个父节点的状态
        """
        entries = [
            (key, prob) for key, prob in self.probabilities.items()
            if key.has_state(self.name, state)
        ]

        for parent in self.parents:
            if not evidence.has(parent.name):
                raise MarginalUnavailableError(self.name, parent.name)
            parent_state = evidence.get_state(parent.name)
            entries = [
                (key, prob) for key, prob in entries
                if key.has_state(parent.name, parent_state)
            ]

        return float(sum(prob for _, prob in entries))

    def evaluate_markov_blanket(self, state: str, event: Assignment) -> float:
        """
        计算变量处于 state 时的Markov Blanket得分（未归一化）

        得分 = P(state | 父节点) × Π P(子节点当前状态 | 子节点的父节点)，
        其中子节点的条件概率以 state 代入计算。传入的 event 不会被修改。

        Args:
            state: 候选状态
            event: 包含父节点、子节点及子节点其他父节点状态的完整赋值

        Returns:
            未归一化的得分
        """
        if state not in self.states:
            raise InvalidStateError(self.name, state)

        working = event.copy()
        working.set(self.name, state)

        score = self.evaluate_marginal(state, working)
        for child in self.children:
            child_state = working.get_state(child.name)
            if child_state not in child.states:
                raise InvalidStateError(child.name, child_state)
            score *= child.evaluate_marginal(child_state, working)

        return score

    # ============ 采样 ============

    def get_random_state(self, event: Assignment, rng: Optional[np.random.Generator] = None) -> str:
        """
        按边际概率随机抽取一个状态

        Args:
            event: 包含所有父节点状态的赋值
            rng: 随机数生成器

        Returns:
            抽取的状态
        """
        if not self.states:
            raise StatelessVariableError(self.name)
        rng = rng if rng is not None else np.random.default_rng()

        draw = rng.random()
        marginals = [self.evaluate_marginal(state, event) for state in self.states]
        return _inverse_cdf(self.states, marginals, draw)

    def get_random_state_with_markov_blanket(
        self,
        event: Assignment,
        rng: Optional[np.random.Generator] = None
    ) -> str:
        """
        按归一化的Markov Blanket得分随机抽取一个状态

        所有得分均为0时保留变量当前的状态（没有则取第一个状态）。

        Args:
            event: 完整赋值
            rng: 随机数生成器

        Returns:
            抽取的状态
        """
        if not self.states:
            raise StatelessVariableError(self.name)
        rng = rng if rng is not None else np.random.default_rng()

        draw = rng.random()
        scores = np.array([self.evaluate_markov_blanket(state, event) for state in self.states])
        magnitude = scores.sum()

        if magnitude <= 0.0:
            fallback = event.get_state(self.name) if event.has(self.name) else self.states[0]
            logger.debug(f"{self.name} 的Markov Blanket得分全为0，保留状态 {fallback}")
            return fallback

        return _inverse_cdf(self.states, scores / magnitude, draw)
