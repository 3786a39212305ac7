#!/usr/bin/env python3
"""
Testy jednostkowe Population: inicjalizacja, wymiana najgorszego, remisy, statystyki.
"""
import unittest

import numpy as np

from tspga.chromosome import Chromosome
from tspga.errors import FitnessNotEvaluatedError
from tspga.population import Population

from ga_test_utils import SQUARE, is_perm, random_cost_model
from tspga.fitness import CostModel


class TestPopulation(unittest.TestCase):

    def setUp(self):
        self.cm = random_cost_model(8, seed=2)
        self.pop = Population.random(10, self.cm, np.random.default_rng(0))

    def test_random_population(self):
        self.assertEqual(len(self.pop), 10)
        for ch in self.pop:
            self.assertTrue(is_perm(ch.route, 8))
            self.assertAlmostEqual(ch.fitness(), self.cm.tour_cost(ch.route))

    def test_best_and_worst(self):
        costs = self.pop.costs()
        self.assertEqual(self.pop.best().fitness(), costs.min())
        self.assertEqual(self.pop.worst().fitness(), costs.max())

    def test_replace_worst_keeps_size(self):
        child = Chromosome(np.arange(8))
        child.evaluate(self.cm)
        worst_idx = self.pop.worst_index()
        idx = self.pop.replace_worst(child)
        self.assertEqual(idx, worst_idx)
        self.assertEqual(len(self.pop), 10)
        self.assertIs(self.pop[idx], child)

    def test_replace_returns_evicted(self):
        evicted_expected = self.pop[3]
        child = Chromosome(np.arange(8))
        child.evaluate(self.cm)
        self.assertIs(self.pop.replace(3, child), evicted_expected)

    def test_dirty_child_rejected(self):
        with self.assertRaises(FitnessNotEvaluatedError):
            self.pop.replace_worst(Chromosome(np.arange(8)))
        with self.assertRaises(FitnessNotEvaluatedError):
            self.pop.add(Chromosome(np.arange(8)))

    def test_ties_use_lowest_index(self):
        cm = CostModel(SQUARE)
        members = [Chromosome([0, 1, 2, 3]), Chromosome([0, 2, 1, 3]), Chromosome([1, 0, 2, 3]),
                   Chromosome([3, 2, 1, 0]), Chromosome([0, 2, 1, 3])]
        for m in members:
            m.evaluate(cm)
        pop = Population(members)
        self.assertEqual(pop.best_index(), 0)
        self.assertEqual(pop.worst_index(), 1)

    def test_insertion_order_preserved(self):
        members = list(self.pop)
        copy = Population(members)
        self.assertEqual([id(m) for m in copy], [id(m) for m in members])

    def test_stats(self):
        c = self.pop.costs()
        s = self.pop.stats()
        self.assertAlmostEqual(s.best, c.min())
        self.assertAlmostEqual(s.worst, c.max())
        self.assertAlmostEqual(s.average, c.mean())


if __name__ == "__main__":
    unittest.main()
