#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
自动命名上下文
为未指定名称的变量和网络生成 Node1、Net1 等名称
"""
import itertools
from typing import Optional


class NamingContext:
    """
    命名计数器的持有者

    每个上下文拥有独立的计数器，不同上下文之间互不影响。
    """

    def __init__(self, variable_prefix: str = "Node", network_prefix: str = "Net"):
        self.variable_prefix = variable_prefix
        self.network_prefix = network_prefix
        self._variable_counter = itertools.count(1)
        self._network_counter = itertools.count(1)

    def next_variable_name(self) -> str:
        return f"{self.variable_prefix}{next(self._variable_counter)}"

    def next_network_name(self) -> str:
        return f"{self.network_prefix}{next(self._network_counter)}"

    def create_variable(self, name: Optional[str] = None):
        """
        创建变量，未指定名称时自动命名

        Args:
            name: 变量名

        Returns:
            Variable对象
        """
        from sbn.bayes.variable import Variable
        return Variable(name or self.next_variable_name())

    def create_network(self, title: Optional[str] = None):
        """
        创建网络，未指定标题时自动命名

        Args:
            title: 网络标题

        Returns:
            Network对象
        """
        from sbn.bayes.network import Network
        return Network(title or self.next_network_name(), naming=self)
