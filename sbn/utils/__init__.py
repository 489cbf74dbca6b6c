#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
工具模块
"""
from sbn.utils.logging import setup_logger, set_log_level
from sbn.utils.config import load_config, ensure_dir

__all__ = [
    'setup_logger',
    'set_log_level',
    'load_config',
    'ensure_dir'
]
