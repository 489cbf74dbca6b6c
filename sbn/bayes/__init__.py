#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络模块
包含变量赋值、条件概率表、组合枚举、边际概率与Markov Blanket计算、采样推断等核心功能
"""
from sbn.bayes.errors import (
    BayesNetError,
    UnknownVariableError,
    InvalidStateError,
    StatelessVariableError,
    MarginalUnavailableError,
    SamplingError
)
from sbn.bayes.assignment import Assignment
from sbn.bayes.variable import Variable, CombinationStep
from sbn.bayes.sampling import InferenceConfig, InferenceMode, DEFAULT_SAMPLE_COUNT
from sbn.bayes.network import Network
from sbn.bayes.naming import NamingContext
from sbn.bayes.networks import build_grass_wetness_network

__all__ = [
    'BayesNetError',
    'UnknownVariableError',
    'InvalidStateError',
    'StatelessVariableError',
    'MarginalUnavailableError',
    'SamplingError',
    'Assignment',
    'Variable',
    'CombinationStep',
    'InferenceConfig',
    'InferenceMode',
    'DEFAULT_SAMPLE_COUNT',
    'Network',
    'NamingContext',
    'build_grass_wetness_network'
]
