#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
内置示例网络
经典的草地湿润（Grass Wetness）网络: Cloudy -> {Sprinkler, Rain} -> GrassWet
"""
from typing import Sequence

from sbn.bayes.assignment import Assignment
from sbn.bayes.errors import StatelessVariableError
from sbn.bayes.network import Network
from sbn.bayes.variable import Variable

GRASS_WETNESS_TITLE = "Grass Wetness Belief Net"

BOOLEAN_STATES = ['T', 'F']


# ============ 条件概率表（按 next_combination 的枚举顺序） ============

# P(Cloudy): T, F
CLOUDY_CPT = [0.5, 0.5]

# P(Sprinkler | Cloudy): (S, C) = (T, T), (T, F), (F, T), (F, F)
SPRINKLER_CPT = [0.1, 0.5, 0.9, 0.5]

# P(Rain | Cloudy): (R, C) = (T, T), (T, F), (F, T), (F, F)
RAIN_CPT = [0.8, 0.2, 0.2, 0.8]

# P(GrassWet | Sprinkler, Rain): (W, S, R) = (T, T, T), (T, T, F), (T, F, T), (T, F, F),
#                                            (F, T, T), (F, T, F), (F, F, T), (F, F, F)
GRASS_WET_CPT = [0.99, 0.9, 0.9, 0.0, 0.01, 0.1, 0.1, 1.0]


def set_probabilities(variable: Variable, start: Assignment, probabilities: Sequence[float]) -> None:
    """
    从 start 开始按枚举顺序依次填写概率表

    Args:
        variable: 变量
        start: 第一个组合（自身和所有父节点都取第一个状态）
        probabilities: 与枚举顺序对应的概率

    Raises:
        ValueError: 概率个数与组合数不一致
    """
    expected = variable.combination_count()
    if len(probabilities) != expected:
        raise ValueError(f"{variable.name} 需要 {expected} 个概率，实际提供 {len(probabilities)} 个")

    for combination, prob in zip(variable.iter_combinations(start), probabilities):
        variable.set_probability(combination, prob)


def first_combination(variable: Variable) -> Assignment:
    """变量自身和所有父节点都取第一个状态的赋值"""
    start = Assignment()
    for member in variable.parents + [variable]:
        if not member.states:
            raise StatelessVariableError(member.name)
        start.set(member.name, member.states[0])
    return start


def build_grass_wetness_network(naming=None, config=None) -> Network:
    """
    构建草地湿润网络

    Args:
        naming: NamingContext对象（网络标题固定，不消耗计数）
        config: 默认推断参数

    Returns:
        Network对象
    """
    network = Network(GRASS_WETNESS_TITLE, naming=naming, config=config)

    cloudy = Variable("Cloudy")
    sprinkler = Variable("Sprinkler")
    rain = Variable("Rain")
    grass_wet = Variable("GrassWet")

    for variable in (cloudy, sprinkler, rain, grass_wet):
        for state in BOOLEAN_STATES:
            variable.add_state(state)
        network.add_node(variable)

    cloudy.add_child(sprinkler)
    cloudy.add_child(rain)
    sprinkler.add_child(grass_wet)
    rain.add_child(grass_wet)

    set_probabilities(cloudy, first_combination(cloudy), CLOUDY_CPT)
    set_probabilities(sprinkler, first_combination(sprinkler), SPRINKLER_CPT)
    set_probabilities(rain, first_combination(rain), RAIN_CPT)
    set_probabilities(grass_wet, first_combination(grass_wet), GRASS_WET_CPT)

    return network
