#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
主执行脚本
加载网络文件，设置证据并输出查询变量的后验概率
"""
import argparse
import sys

from sbn.bayes import BayesNetError, InferenceConfig, InferenceMode, NamingContext, build_grass_wetness_network
from sbn.utils import load_config, setup_logger, set_log_level
from sbn.utils.io import export_network, load_network, parse_evidence

logger = setup_logger("main")


def build_inference_config(config: dict, args: argparse.Namespace) -> InferenceConfig:
    """
    合并配置文件与命令行参数

    Args:
        config: 配置字典
        args: 命令行参数

    Returns:
        InferenceConfig对象
    """
    section = dict(config.get('inference') or {})
    if args.samples is not None:
        section['sample_count'] = args.samples
    if args.mode is not None:
        section['mode'] = args.mode
    if args.seed is not None:
        section['seed'] = args.seed
    if args.progress:
        section['show_progress'] = True
    return InferenceConfig.from_dict(section)


def run(args: argparse.Namespace) -> int:
    """
    执行一次查询

    Args:
        args: 命令行参数

    Returns:
        退出码
    """
    config = load_config(args.config)
    set_log_level(config['logging']['level'])

    inference_config = build_inference_config(config, args)
    naming = NamingContext()

    if args.demo or not args.network:
        logger.info("使用内置的草地湿润网络")
        network = build_grass_wetness_network(naming, config=inference_config)
    else:
        network = load_network(args.network, naming=naming)
        network.config = inference_config

    if args.export:
        export_network(network, args.export)

    evidence = parse_evidence(args.evidence)
    network.set_evidence(evidence)

    result = network.query_node(args.query)

    print(f"网络: {network.title}")
    for state, prob in result.items():
        print(f"P({args.query} = {state} | {evidence}) = {prob:.3f}")

    return 0


def main():
    """主函数"""
    parser = argparse.ArgumentParser(description='离散贝叶斯网络后验概率查询')
    parser.add_argument('--config', type=str, default='config.yaml', help='配置文件路径')
    parser.add_argument('--network', type=str, default=None, help='网络文件路径（YAML）')
    parser.add_argument('--demo', action='store_true', help='使用内置的草地湿润网络')
    parser.add_argument('--query', type=str, default='GrassWet', help='查询变量名')
    parser.add_argument('--evidence', type=str, nargs='*', default=[],
                        help='证据，格式为 变量=状态，例如 Sprinkler=F Rain=T')
    parser.add_argument('--samples', type=int, default=None, help='样本数')
    parser.add_argument('--mode', type=str, default=None,
                        choices=[m.value for m in InferenceMode], help='推断方式')
    parser.add_argument('--seed', type=int, default=None, help='随机种子')
    parser.add_argument('--progress', action='store_true', help='显示进度条')
    parser.add_argument('--export', type=str, default=None, help='把网络导出到指定的YAML文件')

    args = parser.parse_args()

    try:
        return run(args)
    except (BayesNetError, ValueError, OSError) as e:
        logger.error(f"查询失败: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
