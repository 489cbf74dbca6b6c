#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
sbn - 离散贝叶斯网络推断库
"""
__version__ = '0.1.0'
