#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
评估模块
包含精确枚举后验和采样误差指标
"""
from sbn.evaluation.metrics import (
    enumerate_posterior,
    total_variation_distance,
    max_absolute_error,
    chi_square_test,
    evaluate_posterior
)

__all__ = [
    'enumerate_posterior',
    'total_variation_distance',
    'max_absolute_error',
    'chi_square_test',
    'evaluate_posterior'
]
