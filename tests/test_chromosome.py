#!/usr/bin/env python3
"""
Testy jednostkowe Chromosome: konstrukcja, cache fitnessu (kontrakt „dirty”), losowanie.
"""
import unittest

import numpy as np

from tspga.chromosome import Chromosome, random_chromosome
from tspga.errors import FitnessNotEvaluatedError, InvalidTourError
from tspga.fitness import CostModel

from ga_test_utils import SQUARE, is_perm


class TestChromosome(unittest.TestCase):

    def setUp(self):
        self.cm = CostModel(SQUARE)

    def test_construction_validates_permutation(self):
        with self.assertRaises(InvalidTourError):
            Chromosome([0, 1, 1, 3])

    def test_float_route_is_not_truncated(self):
        with self.assertRaises(InvalidTourError):
            Chromosome([0.7, 1.2])
        with self.assertRaises(InvalidTourError):
            Chromosome(np.array([0.0, 1.0, 2.0]))

    def test_fitness_requires_evaluation(self):
        ch = Chromosome([0, 1, 2, 3])
        self.assertFalse(ch.is_evaluated)
        with self.assertRaises(FitnessNotEvaluatedError):
            ch.fitness()
        self.assertAlmostEqual(ch.evaluate(self.cm), 4.0)
        self.assertAlmostEqual(ch.fitness(), 4.0)

    def test_invalidate_marks_dirty(self):
        ch = Chromosome([0, 1, 2, 3])
        ch.evaluate(self.cm)
        ch.route[[0, 1]] = ch.route[[1, 0]]
        ch.invalidate()
        with self.assertRaises(FitnessNotEvaluatedError):
            ch.fitness()

    def test_evaluate_detects_broken_route(self):
        ch = Chromosome([0, 1, 2, 3])
        ch.route[0] = 1
        with self.assertRaises(InvalidTourError):
            ch.evaluate(self.cm)

    def test_copy_is_independent(self):
        ch = Chromosome([0, 1, 2, 3], cost=4.0)
        cp = ch.copy()
        cp.route[0], cp.route[1] = 1, 0
        self.assertEqual(ch.route.tolist(), [0, 1, 2, 3])
        self.assertEqual(cp.fitness(), 4.0)

    def test_route_is_copied_from_input(self):
        src = np.array([0, 1, 2, 3])
        ch = Chromosome(src)
        src[0] = 3
        self.assertEqual(ch.route.tolist(), [0, 1, 2, 3])


class TestRandomChromosome(unittest.TestCase):

    def test_random_is_permutation(self):
        rng = np.random.default_rng(0)
        for n in (2, 3, 10, 57):
            with self.subTest(n=n):
                ch = random_chromosome(n, rng)
                self.assertTrue(is_perm(ch.route, n))
                self.assertFalse(ch.is_evaluated)

    def test_random_with_cost_model_is_evaluated(self):
        cm = CostModel(SQUARE)
        ch = random_chromosome(4, np.random.default_rng(1), cost_model=cm)
        self.assertAlmostEqual(ch.fitness(), cm.tour_cost(ch.route))

    def test_same_seed_same_route(self):
        a = random_chromosome(20, np.random.default_rng(7))
        b = random_chromosome(20, np.random.default_rng(7))
        self.assertTrue(a.same_route(b))


if __name__ == "__main__":
    unittest.main()
