#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
日志工具
所有模块通过 setup_logger 获取统一格式的日志记录器
"""
import os
import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# 所有记录器名称都挂在该前缀下，便于统一调整级别
ROOT_NAME = "sbn"


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    resolved = getattr(logging, str(level).upper(), None)
    if not isinstance(resolved, int):
        raise ValueError(f"未知的日志级别: {level}")
    return resolved


def setup_logger(
    name: str,
    log_dir: Optional[str] = "logs",
    level: Union[str, int] = "INFO"
) -> logging.Logger:
    """
    设置日志记录器

    Args:
        name: 日志记录器名称（自动加上 sbn. 前缀）
        log_dir: 日志目录，None 表示只输出到控制台
        level: 日志级别

    Returns:
        配置好的日志记录器
    """
    level_value = _resolve_level(level)

    full_name = name if name.startswith(ROOT_NAME) else f"{ROOT_NAME}.{name}"
    logger = logging.getLogger(full_name)
    logger.setLevel(level_value)
    # 处理器挂在各自记录器上，避免经由根记录器重复输出
    logger.propagate = False

    # 避免重复添加处理器
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    # 控制台处理器
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level_value)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 文件处理器
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"{name}.log"),
            encoding='utf-8'
        )
        file_handler.setLevel(level_value)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def set_log_level(level: Union[str, int]) -> None:
    """
    调整所有 sbn 记录器及其处理器的级别

    Args:
        level: 日志级别
    """
    level_value = _resolve_level(level)
    for logger_name in list(logging.root.manager.loggerDict):
        if not logger_name.startswith(ROOT_NAME):
            continue
        logger = logging.getLogger(logger_name)
        logger.setLevel(level_value)
        for handler in logger.handlers:
            handler.setLevel(level_value)
