#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络
持有全部变量和当前证据，负责回答后验概率查询
"""
from typing import Dict, List, Optional

import networkx as nx

from sbn.bayes.assignment import Assignment
from sbn.bayes.errors import UnknownVariableError
from sbn.bayes.sampling import InferenceConfig, run_query
from sbn.bayes.structure import (
    build_graph,
    get_markov_blanket,
    get_topological_order,
    is_acyclic,
)
from sbn.bayes.variable import Variable
from sbn.utils.logging import setup_logger

logger = setup_logger("bayes_network")


class Network:
    """
    贝叶斯网络

    变量名在网络内唯一；网络不检查是否无环，需要时可调用 is_acyclic。
    """

    def __init__(self, title: str = "", naming=None, config: Optional[InferenceConfig] = None):
        """
        初始化网络

        Args:
            title: 网络标题，为空时由命名上下文生成
            naming: NamingContext对象
            config: 默认推断参数
        """
        if not title:
            if naming is None:
                raise ValueError("未指定网络标题时必须提供命名上下文")
            title = naming.next_network_name()
        self.title = title
        self.config = config or InferenceConfig()
        self._variables: Dict[str, Variable] = {}
        self._evidence = Assignment()
        logger.info(f"初始化贝叶斯网络: {self.title}")

    def __repr__(self) -> str:
        return f"Network({self.title!r}, variables={list(self._variables)})"

    def __contains__(self, name: str) -> bool:
        return name in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    # ============ 变量管理 ============

    def add_node(self, variable: Variable) -> None:
        """
        把变量加入网络

        Args:
            variable: Variable对象

        Raises:
            ValueError: 网络中已有同名变量
        """
        if variable.name in self._variables:
            raise ValueError(f"网络 {self.title} 中已存在变量: {variable.name}")
        self._variables[variable.name] = variable
        logger.debug(f"添加变量: {variable.name}, 状态: {variable.states}")

    def get_node(self, name: str) -> Variable:
        try:
            return self._variables[name]
        except KeyError:
            raise UnknownVariableError(name) from None

    @property
    def nodes(self) -> List[Variable]:
        """按加入顺序排列的全部变量"""
        return list(self._variables.values())

    # ============ 证据与查询 ============

    @property
    def evidence(self) -> Assignment:
        """当前证据的副本"""
        return self._evidence.copy()

    def set_evidence(self, assignment: Assignment) -> None:
        """
        整体替换当前证据

        Args:
            assignment: 观测到的变量状态
        """
        unknown = [name for name in assignment if name not in self._variables]
        if unknown:
            logger.warning(f"证据中包含网络中不存在的变量: {unknown}")
        self._evidence = assignment.copy()
        logger.debug(f"设置证据: {self._evidence}")

    def query_node(self, name: str, config: Optional[InferenceConfig] = None) -> Dict[str, float]:
        """
        计算变量在当前证据下每个状态的后验概率

        Args:
            name: 查询变量名
            config: 推断参数，None 表示使用网络的默认参数

        Returns:
            状态到后验概率的映射
        """
        target = self.get_node(name)
        return run_query(self.nodes, self._evidence, target, config or self.config)

    # ============ 结构分析 ============

    def to_graph(self) -> nx.DiGraph:
        return build_graph(self.nodes)

    def is_acyclic(self) -> bool:
        return is_acyclic(self.to_graph())

    def get_topological_order(self) -> List[str]:
        return get_topological_order(self.to_graph())

    def get_markov_blanket(self, name: str) -> List[str]:
        """获取变量的Markov Blanket（父节点、子节点、子节点的其他父节点）"""
        self.get_node(name)
        return get_markov_blanket(self.to_graph(), name)
