#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试随机变量：组合枚举、边际概率、Markov Blanket与采样
"""
import unittest

import numpy as np

from sbn.bayes.assignment import Assignment
from sbn.bayes.errors import (
    InvalidStateError,
    MarginalUnavailableError,
    StatelessVariableError,
    UnknownVariableError,
)
from sbn.bayes.networks import build_grass_wetness_network
from sbn.bayes.variable import CombinationStep, Variable
from sbn.evaluation.metrics import chi_square_test


def make_variable(name, states):
    variable = Variable(name)
    for state in states:
        variable.add_state(state)
    return variable


class FixedDraw:
    """总是返回同一个随机数的生成器"""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class TestStructure(unittest.TestCase):
    """测试父子关系"""

    def test_add_child_links_both_directions(self):
        parent = make_variable("P", ["T", "F"])
        child = make_variable("C", ["T", "F"])
        parent.add_child(child)
        self.assertEqual(parent.children, [child])
        self.assertEqual(child.parents, [parent])

    def test_add_parent_links_both_directions(self):
        parent = make_variable("P", ["T", "F"])
        child = make_variable("C", ["T", "F"])
        child.add_parent(parent)
        self.assertEqual(parent.children, [child])
        self.assertEqual(child.parents, [parent])

    def test_self_loop_is_ignored(self):
        v = make_variable("V", ["T", "F"])
        v.add_child(v)
        v.add_parent(v)
        self.assertEqual(v.parents, [])
        self.assertEqual(v.children, [])

    def test_can_be_evaluated(self):
        p1 = make_variable("P1", ["T", "F"])
        p2 = make_variable("P2", ["T", "F"])
        child = make_variable("C", ["T", "F"])
        child.add_parent(p1)
        child.add_parent(p2)

        self.assertTrue(p1.can_be_evaluated(Assignment()))
        self.assertFalse(child.can_be_evaluated(Assignment({"P1": "T"})))
        self.assertTrue(child.can_be_evaluated(Assignment({"P1": "T", "P2": "F"})))

    def test_unnamed_variable_requires_naming(self):
        with self.assertRaises(ValueError):
            Variable()


class TestNextCombination(unittest.TestCase):
    """测试里程表式组合枚举"""

    def setUp(self):
        self.p1 = make_variable("P1", ["T", "F"])
        self.p2 = make_variable("P2", ["T", "F"])
        self.node = make_variable("X", ["T", "F"])
        self.p1.add_child(self.node)
        self.p2.add_child(self.node)
        self.start = Assignment({"X": "T", "P1": "T", "P2": "T"})

    def test_enumeration_order(self):
        """最后添加的父节点变化最快，变量自身是最高位"""
        e = self.start.copy()
        seen = [(e.get_state("X"), e.get_state("P1"), e.get_state("P2"))]
        for _ in range(7):
            self.node.next_combination(e)
            seen.append((e.get_state("X"), e.get_state("P1"), e.get_state("P2")))

        self.assertEqual(seen, [
            ("T", "T", "T"), ("T", "T", "F"), ("T", "F", "T"), ("T", "F", "F"),
            ("F", "T", "T"), ("F", "T", "F"), ("F", "F", "T"), ("F", "F", "F"),
        ])

    def test_enumeration_is_cyclic(self):
        """推进 组合数 次后回到起点，中间每个组合恰好出现一次"""
        e = self.start.copy()
        keys = set()
        steps = []
        for _ in range(self.node.combination_count()):
            keys.add(e.key)
            steps.append(self.node.advance_combination(e))

        self.assertEqual(len(keys), 8)
        self.assertEqual(e, self.start)
        self.assertEqual(steps[-1], CombinationStep.WRAPPED_ALL)
        self.assertTrue(all(step == CombinationStep.ADVANCED for step in steps[:-1]))

    def test_next_combination_returns_same_object(self):
        e = self.start.copy()
        self.assertIs(self.node.next_combination(e), e)

    def test_mixed_radix(self):
        """三状态变量、两状态父节点共 6 个组合"""
        parent = make_variable("P", ["a", "b"])
        node = make_variable("X", ["x", "y", "z"])
        node.add_parent(parent)

        combos = list(node.iter_combinations(Assignment({"P": "a", "X": "x"})))
        self.assertEqual(len(combos), 6)
        self.assertEqual(len({c.key for c in combos}), 6)
        self.assertEqual(str(combos[1]), "P = b, X = x")
        self.assertEqual(str(combos[2]), "P = a, X = y")

    def test_no_parents_cycles_own_states(self):
        node = make_variable("X", ["a", "b", "c"])
        e = Assignment({"X": "a"})
        self.assertEqual(node.next_combination(e).get_state("X"), "b")
        self.assertEqual(node.next_combination(e).get_state("X"), "c")
        self.assertEqual(node.advance_combination(e), CombinationStep.WRAPPED_ALL)
        self.assertEqual(e.get_state("X"), "a")

    def test_iter_combinations_does_not_modify_start(self):
        start = self.start.copy()
        list(self.node.iter_combinations(start))
        self.assertEqual(start, self.start)

    def test_invalid_state(self):
        e = Assignment({"X": "T", "P1": "T", "P2": "maybe"})
        with self.assertRaises(InvalidStateError):
            self.node.next_combination(e)

    def test_stateless_parent(self):
        empty = Variable("Empty")
        node = make_variable("X", ["T", "F"])
        node.add_parent(empty)
        with self.assertRaises(StatelessVariableError):
            node.next_combination(Assignment({"X": "T", "Empty": "T"}))

    def test_missing_parent_state(self):
        e = Assignment({"X": "T", "P1": "T"})
        with self.assertRaises(UnknownVariableError):
            self.node.next_combination(e)


class TestEvaluation(unittest.TestCase):
    """测试边际概率与Markov Blanket"""

    def setUp(self):
        self.network = build_grass_wetness_network()
        self.cloudy = self.network.get_node("Cloudy")
        self.sprinkler = self.network.get_node("Sprinkler")
        self.rain = self.network.get_node("Rain")
        self.grass_wet = self.network.get_node("GrassWet")

    def test_marginal_of_root(self):
        self.assertAlmostEqual(self.cloudy.evaluate_marginal("T", Assignment()), 0.5)

    def test_marginal_given_parents(self):
        evidence = Assignment({"Sprinkler": "F", "Rain": "T"})
        self.assertAlmostEqual(self.grass_wet.evaluate_marginal("T", evidence), 0.9)
        self.assertAlmostEqual(self.sprinkler.evaluate_marginal("T", Assignment({"Cloudy": "T"})), 0.1)

    def test_marginal_ignores_own_state_in_evidence(self):
        """证据中自身的状态会被 state 参数覆盖"""
        evidence = Assignment({"Cloudy": "F", "Rain": "F"})
        self.assertAlmostEqual(self.rain.evaluate_marginal("T", evidence), 0.2)

    def test_marginals_sum_to_one(self):
        for cloudy in ["T", "F"]:
            evidence = Assignment({"Cloudy": cloudy})
            total = sum(self.rain.evaluate_marginal(s, evidence) for s in self.rain.states)
            self.assertAlmostEqual(total, 1.0)

        for s in ["T", "F"]:
            for r in ["T", "F"]:
                evidence = Assignment({"Sprinkler": s, "Rain": r})
                total = sum(self.grass_wet.evaluate_marginal(w, evidence) for w in self.grass_wet.states)
                self.assertAlmostEqual(total, 1.0)

    def test_marginal_sums_finer_grained_entries(self):
        """键中包含祖父节点的条目会被求和"""
        grandparent = make_variable("G", ["T", "F"])
        parent = make_variable("P", ["T", "F"])
        node = make_variable("X", ["T", "F"])
        grandparent.add_child(parent)
        parent.add_child(node)

        node.set_probability(Assignment({"X": "T", "P": "T", "G": "T"}), 0.3)
        node.set_probability(Assignment({"X": "T", "P": "T", "G": "F"}), 0.2)
        node.set_probability(Assignment({"X": "T", "P": "F", "G": "T"}), 0.05)

        self.assertAlmostEqual(node.evaluate_marginal("T", Assignment({"P": "T"})), 0.5)

    def test_marginal_unavailable(self):
        with self.assertRaises(MarginalUnavailableError):
            self.grass_wet.evaluate_marginal("T", Assignment({"Sprinkler": "F"}))

    def test_set_probability_overwrites(self):
        node = make_variable("X", ["T", "F"])
        key = Assignment({"X": "T"})
        node.set_probability(key, 0.3)
        node.set_probability(Assignment({"X": "T"}), 0.4)
        self.assertEqual(len(node.probabilities), 1)
        self.assertAlmostEqual(node.get_probability(key), 0.4)

    def test_set_probability_copies_key(self):
        node = make_variable("X", ["T", "F"])
        key = Assignment({"X": "T"})
        node.set_probability(key, 0.3)
        key.set("X", "F")
        self.assertAlmostEqual(node.get_probability(Assignment({"X": "T"})), 0.3)
        self.assertAlmostEqual(node.get_probability(key), 0.0)

    def test_markov_blanket_score(self):
        """得分 = 自身条件概率 × 子节点条件概率"""
        event = Assignment({"Cloudy": "T", "Sprinkler": "F", "Rain": "F", "GrassWet": "T"})
        self.assertAlmostEqual(self.rain.evaluate_markov_blanket("T", event), 0.8 * 0.9)
        self.assertAlmostEqual(self.rain.evaluate_markov_blanket("F", event), 0.2 * 0.0)

        # 传入的赋值保持不变
        self.assertEqual(event.get_state("Rain"), "F")

    def test_markov_blanket_of_root(self):
        event = Assignment({"Cloudy": "F", "Sprinkler": "T", "Rain": "T", "GrassWet": "T"})
        self.assertAlmostEqual(self.cloudy.evaluate_markov_blanket("T", event), 0.5 * 0.1 * 0.8)
        self.assertAlmostEqual(self.cloudy.evaluate_markov_blanket("F", event), 0.5 * 0.5 * 0.2)

    def test_markov_blanket_invalid_child_state(self):
        event = Assignment({"Cloudy": "T", "Sprinkler": "F", "Rain": "F", "GrassWet": "wet"})
        with self.assertRaises(InvalidStateError):
            self.rain.evaluate_markov_blanket("T", event)

    def test_markov_blanket_missing_child_state(self):
        event = Assignment({"Cloudy": "T", "Sprinkler": "F", "Rain": "F"})
        with self.assertRaises(UnknownVariableError):
            self.rain.evaluate_markov_blanket("T", event)


class TestSampling(unittest.TestCase):
    """测试逆累积分布采样"""

    def setUp(self):
        self.network = build_grass_wetness_network()
        self.rng = np.random.default_rng(12345)

    def test_random_state_follows_marginal(self):
        rain = self.network.get_node("Rain")
        evidence = Assignment({"Cloudy": "T"})
        samples = [rain.get_random_state(evidence, self.rng) for _ in range(2000)]

        result = chi_square_test(samples, {"T": 0.8, "F": 0.2})
        self.assertGreater(result['p_value'], 0.001)

    def test_random_state_with_markov_blanket_follows_full_conditional(self):
        cloudy = self.network.get_node("Cloudy")
        event = Assignment({"Cloudy": "T", "Sprinkler": "T", "Rain": "T", "GrassWet": "T"})
        samples = [cloudy.get_random_state_with_markov_blanket(event, self.rng) for _ in range(2000)]

        p_true = 0.04 / (0.04 + 0.05)
        result = chi_square_test(samples, {"T": p_true, "F": 1.0 - p_true})
        self.assertGreater(result['p_value'], 0.001)

    def test_markov_blanket_excludes_impossible_state(self):
        rain = self.network.get_node("Rain")
        event = Assignment({"Cloudy": "T", "Sprinkler": "F", "Rain": "F", "GrassWet": "T"})
        samples = {rain.get_random_state_with_markov_blanket(event, self.rng) for _ in range(200)}
        self.assertEqual(samples, {"T"})

    def test_draw_beyond_cumulative_sum_returns_last_state(self):
        """概率表之和小于1时，超出的随机数落到最后一个状态"""
        node = make_variable("X", ["A", "B"])
        node.set_probability(Assignment({"X": "A"}), 0.2)
        node.set_probability(Assignment({"X": "B"}), 0.3)

        self.assertEqual(node.get_random_state(Assignment(), FixedDraw(0.1)), "A")
        self.assertEqual(node.get_random_state(Assignment(), FixedDraw(0.25)), "B")
        self.assertEqual(node.get_random_state(Assignment(), FixedDraw(0.99)), "B")

    def test_zero_blanket_keeps_current_state(self):
        node = make_variable("X", ["A", "B"])
        self.assertEqual(
            node.get_random_state_with_markov_blanket(Assignment({"X": "B"}), FixedDraw(0.0)),
            "B"
        )
        self.assertEqual(node.get_random_state_with_markov_blanket(Assignment(), FixedDraw(0.0)), "A")

    def test_stateless_variable_cannot_be_sampled(self):
        with self.assertRaises(StatelessVariableError):
            Variable("Empty").get_random_state(Assignment(), self.rng)


if __name__ == '__main__':
    unittest.main()
