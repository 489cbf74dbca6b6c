#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络异常定义
网络或查询不合法时抛出，由调用方处理
"""


class BayesNetError(Exception):
    """所有贝叶斯网络异常的基类"""
    pass


class UnknownVariableError(BayesNetError, LookupError):
    """赋值中不存在所请求的变量"""

    def __init__(self, name: str):
        super().__init__(f"未知变量: {name}")
        self.name = name


class InvalidStateError(BayesNetError, ValueError):
    """赋值中的状态不在变量声明的状态列表里"""

    def __init__(self, name: str, state: str):
        super().__init__(f"赋值包含无效状态: {name} = {state}")
        self.name = name
        self.state = state


class StatelessVariableError(BayesNetError, ValueError):
    """枚举时遇到没有任何状态的变量"""

    def __init__(self, name: str):
        super().__init__(f"变量没有声明任何状态: {name}")
        self.name = name


class MarginalUnavailableError(BayesNetError):
    """证据缺少父节点状态，无法计算边际概率"""

    def __init__(self, name: str, parent: str):
        super().__init__(f"无法计算 {name} 的边际概率: 证据中缺少父节点 {parent} 的状态")
        self.name = name
        self.parent = parent


class SamplingError(BayesNetError):
    """采样无法完成（网络结构错误或证据概率为零）"""
    pass
