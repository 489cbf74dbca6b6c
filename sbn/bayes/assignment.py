#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
变量赋值（事件）
记录若干变量的取值，既用作观测证据，也用作条件概率表的键
"""
from functools import total_ordering
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

from sbn.bayes.errors import UnknownVariableError


@total_ordering
class Assignment:
    """
    变量名到状态名的映射

    每次修改后都会重新生成按变量名排序的 (变量名, 状态) 元组，比较、排序和哈希都只依据该元组，
    因此可以直接作为字典的键。规范字符串 "A = x, B = y" 只用于展示，名称中含有 "," 或 "=" 时也不会混淆。
    """

    def __init__(self, observations: Optional[Union['Assignment', Mapping[str, str]]] = None):
        """
        初始化赋值

        Args:
            observations: 初始取值，可以是另一个 Assignment 或普通映射（总是复制）
        """
        if isinstance(observations, Assignment):
            self._observations: Dict[str, str] = dict(observations._observations)
        elif observations:
            self._observations = {str(k): str(v) for k, v in observations.items()}
        else:
            self._observations = {}
        self._pairs: Tuple[Tuple[str, str], ...] = ()
        self._key = ""
        self._refresh()

    def _refresh(self) -> None:
        self._pairs = tuple(sorted(self._observations.items()))
        self._key = ", ".join(f"{name} = {state}" for name, state in self._pairs)

    # ============ 修改 ============

    def set(self, name: str, state: str) -> 'Assignment':
        """设置（或覆盖）变量的状态"""
        self._observations[name] = state
        self._refresh()
        return self

    def remove(self, name: str) -> 'Assignment':
        """移除变量，不存在时不做任何事"""
        self._observations.pop(name, None)
        self._refresh()
        return self

    def clear(self) -> 'Assignment':
        """移除所有变量"""
        self._observations.clear()
        self._refresh()
        return self

    # ============ 查询 ============

    def has(self, name: str) -> bool:
        return name in self._observations

    def has_state(self, name: str, state: str) -> bool:
        return self._observations.get(name) == state

    def get_state(self, name: str) -> str:
        """
        获取变量的状态

        Args:
            name: 变量名

        Returns:
            状态名

        Raises:
            UnknownVariableError: 变量未设置
        """
        try:
            return self._observations[name]
        except KeyError:
            raise UnknownVariableError(name) from None

    def matches(self, other: 'Assignment') -> bool:
        """other 中的每个取值是否都出现在当前赋值中"""
        return all(self.has_state(name, state) for name, state in other.items())

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._pairs)

    def to_dict(self) -> Dict[str, str]:
        return dict(self.items())

    def copy(self) -> 'Assignment':
        return Assignment(self)

    @property
    def key(self) -> str:
        """规范字符串（仅用于展示）"""
        return self._key

    # ============ 比较与展示 ============

    def __eq__(self, other) -> bool:
        if not isinstance(other, Assignment):
            return NotImplemented
        return self._pairs == other._pairs

    def __lt__(self, other: 'Assignment') -> bool:
        if not isinstance(other, Assignment):
            return NotImplemented
        return self._pairs < other._pairs

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __contains__(self, name: str) -> bool:
        return name in self._observations

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._observations))

    def __len__(self) -> int:
        return len(self._observations)

    def __str__(self) -> str:
        return self._key

    def __repr__(self) -> str:
        return f"Assignment({self._key})"
