#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
快速入门示例
手动构建草地湿润网络并查询 P(GrassWet | Sprinkler=F, Rain=T)
"""
import sys

from sbn.bayes import Assignment, InferenceConfig, Network, Variable


def build_network() -> Network:
    """
    逐步构建网络，演示用 next_combination 填写条件概率表
    """
    network = Network("Grass Wetness Belief Net", config=InferenceConfig(seed=2005))

    cloudy = Variable("Cloudy")
    sprinkler = Variable("Sprinkler")
    rain = Variable("Rain")
    grass_wet = Variable("GrassWet")

    # 所有变量都是 T/F 两种状态
    for variable in (cloudy, sprinkler, rain, grass_wet):
        variable.add_state("T")
        variable.add_state("F")
        network.add_node(variable)

    cloudy.add_child(sprinkler)
    cloudy.add_child(rain)
    sprinkler.add_child(grass_wet)
    rain.add_child(grass_wet)

    def show(e: Assignment, prob: float):
        print(f"  P({e}) = {prob}")

    print("\n条件概率表:")

    e = Assignment()
    e.set("Cloudy", "T")
    for prob in [0.5, 0.5]:
        cloudy.set_probability(e, prob)
        show(e, prob)
        cloudy.next_combination(e)

    # e 现在是 Cloudy = T
    e.set("Sprinkler", "T")
    for prob in [0.1, 0.5, 0.9, 0.5]:
        sprinkler.set_probability(e, prob)
        show(e, prob)
        sprinkler.next_combination(e)

    e.remove("Sprinkler")
    e.set("Rain", "T")
    for prob in [0.8, 0.2, 0.2, 0.8]:
        rain.set_probability(e, prob)
        show(e, prob)
        rain.next_combination(e)

    e.remove("Cloudy")
    e.set("GrassWet", "T")
    e.set("Sprinkler", "T")
    for prob in [0.99, 0.9, 0.9, 0.0, 0.01, 0.1, 0.1, 1.0]:
        grass_wet.set_probability(e, prob)
        show(e, prob)
        grass_wet.next_combination(e)

    return network


def main():
    """主函数"""
    print("=" * 80)
    print("sbn 快速入门 - 草地湿润网络")
    print("=" * 80)

    network = build_network()

    evidence = Assignment({"Sprinkler": "F", "Rain": "T"})
    network.set_evidence(evidence)
    result = network.query_node("GrassWet")

    print("\n查询结果:")
    for state, prob in result.items():
        print(f"  GrassWet = {state} 在 {evidence} 下的后验概率为 {prob:.3f}")

    # 理论值为 0.9 / 0.1
    passed = round(result["T"] * 10) == 9 and round(result["F"] * 10) == 1
    print(f"\n{'✓ 结果正确' if passed else '✗ 结果与理论值不符'}")
    print("=" * 80)

    return 0 if passed else 1


if __name__ == '__main__':
    sys.exit(main())
