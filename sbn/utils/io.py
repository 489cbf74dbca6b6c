#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
输入输出工具
网络结构和条件概率表与YAML文件之间的转换
"""
import os
import yaml
from typing import Dict, Any, List, Tuple

from sbn.bayes.assignment import Assignment
from sbn.bayes.network import Network
from sbn.bayes.variable import Variable
from sbn.utils.config import ensure_dir
from sbn.utils.logging import setup_logger

logger = setup_logger("io")


def network_to_dict(network: Network) -> Dict[str, Any]:
    """
    把网络转换为可序列化的字典

    Args:
        network: Network对象

    Returns:
        包含标题和变量列表的字典
    """
    variables = []
    for variable in network.nodes:
        variables.append({
            'name': variable.name,
            'states': list(variable.states),
            'parents': [parent.name for parent in variable.parents],
            'probabilities': [
                {'event': key.to_dict(), 'probability': prob}
                for key, prob in sorted(variable.probabilities.items())
            ]
        })
    return {'title': network.title, 'variables': variables}


def network_from_dict(data: Dict[str, Any], naming=None) -> Network:
    """
    从字典重建网络

    父节点按列出的顺序连接，因此枚举顺序与导出前一致。

    Args:
        data: network_to_dict 的输出格式
        naming: NamingContext对象，用于补全缺失的名称

    Returns:
        Network对象

    Raises:
        ValueError: 父节点不存在或格式错误
    """
    if not isinstance(data, dict) or 'variables' not in data:
        raise ValueError("网络文件格式错误: 缺少 variables")

    network = Network(data.get('title') or "", naming=naming)

    created: List[Tuple[Dict[str, Any], Variable]] = []
    for definition in data['variables'] or []:
        variable = Variable(str(definition.get('name') or ""), naming=naming)
        for state in definition.get('states') or []:
            variable.add_state(str(state))
        network.add_node(variable)
        created.append((definition, variable))

    for definition, variable in created:
        for parent_name in definition.get('parents') or []:
            if str(parent_name) not in network:
                raise ValueError(f"变量 {variable.name} 的父节点不存在: {parent_name}")
            variable.add_parent(network.get_node(str(parent_name)))

        for entry in definition.get('probabilities') or []:
            variable.set_probability(Assignment(entry['event']), float(entry['probability']))

    logger.info(f"网络 {network.title} 已加载，共 {len(network)} 个变量")
    return network


def export_network(network: Network, output_path: str) -> None:
    """
    保存网络到YAML文件

    Args:
        network: Network对象
        output_path: 输出路径
    """
    ensure_dir(os.path.dirname(output_path))
    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.dump(network_to_dict(network), f, allow_unicode=True, default_flow_style=False, sort_keys=False)
    logger.info(f"网络 {network.title} 已保存: {output_path}")


def load_network(file_path: str, naming=None) -> Network:
    """
    从YAML文件加载网络

    Args:
        file_path: 文件路径
        naming: NamingContext对象

    Returns:
        Network对象
    """
    if not file_path.endswith(('.yaml', '.yml')):
        raise ValueError(f"不支持的文件格式: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return network_from_dict(data, naming=naming)


def parse_evidence(pairs, separator: str = '=') -> Assignment:
    """
    解析命令行形式的证据 ["Sprinkler=F", "Rain=T"]

    Args:
        pairs: "变量=状态" 字符串序列
        separator: 分隔符

    Returns:
        Assignment对象
    """
    evidence = Assignment()
    for pair in pairs or []:
        name, sep, state = pair.partition(separator)
        if not sep or not name.strip() or not state.strip():
            raise ValueError(f"证据格式错误（应为 变量{separator}状态）: {pair}")
        evidence.set(name.strip(), state.strip())
    return evidence
