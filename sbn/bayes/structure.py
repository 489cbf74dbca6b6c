#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络DAG结构分析
把变量之间的父子关系转换为networkx有向图
"""
from typing import Iterable, List

import networkx as nx

from sbn.utils.logging import setup_logger

logger = setup_logger("bayes_structure")


def build_graph(variables: Iterable) -> nx.DiGraph:
    """
    根据变量的父子关系构建有向图

    Args:
        variables: Variable对象序列

    Returns:
        networkx有向图，节点为变量名
    """
    graph = nx.DiGraph()
    for variable in variables:
        graph.add_node(variable.name)
        for child in variable.children:
            graph.add_edge(variable.name, child.name)
        for parent in variable.parents:
            graph.add_edge(parent.name, variable.name)
    logger.debug(f"构建有向图: {graph.number_of_nodes()} 个节点, {graph.number_of_edges()} 条边")
    return graph


def is_acyclic(graph: nx.DiGraph) -> bool:
    """检查是否为有向无环图"""
    return nx.is_directed_acyclic_graph(graph)


def get_topological_order(graph: nx.DiGraph) -> List[str]:
    """获取拓扑排序"""
    if not is_acyclic(graph):
        raise ValueError("图中存在环，无法进行拓扑排序")
    return list(nx.topological_sort(graph))


def get_markov_blanket(graph: nx.DiGraph, node: str) -> List[str]:
    """
    获取Markov Blanket

    包含：父节点、子节点、子节点的其他父节点

    Args:
        graph: 有向图
        node: 节点名

    Returns:
        Markov Blanket节点列表（按名称排序）
    """
    markov_blanket = set(graph.predecessors(node))

    children = list(graph.successors(node))
    markov_blanket.update(children)

    for child in children:
        markov_blanket.update(graph.predecessors(child))

    # 移除节点自身
    markov_blanket.discard(node)

    return sorted(markov_blanket)
