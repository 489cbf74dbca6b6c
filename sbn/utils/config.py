#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
配置工具
"""
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional


# 与 config.yaml 保持一致的默认配置
DEFAULT_CONFIG: Dict[str, Any] = {
    'inference': {
        'sample_count': 1000,
        'mode': 'mcmc',
        'burn_in': 100,
        'seed': None,
        'max_attempts_factor': 100,
        'show_progress': False,
    },
    'logging': {
        'level': 'INFO',
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = "config.yaml") -> Dict[str, Any]:
    """
    加载配置文件，未出现的配置项使用默认值

    Args:
        config_path: 配置文件路径，None 表示只使用默认配置

    Returns:
        配置字典
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"配置文件格式错误: {config_path}")

    return _merge(DEFAULT_CONFIG, config)


def ensure_dir(directory: str) -> None:
    """
    确保目录存在，不存在则创建

    Args:
        directory: 目录路径
    """
    if directory:  # 防止空字符串
        Path(directory).mkdir(parents=True, exist_ok=True)
