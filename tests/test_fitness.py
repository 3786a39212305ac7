#!/usr/bin/env python3
"""
Testy jednostkowe CostModel: koszt cyklu, walidacja permutacji, kształt macierzy.
"""
import math
import unittest

import numpy as np

from tspga.chromosome import Chromosome
from tspga.errors import InputDataError, InvalidTourError
from tspga.fitness import CostModel, check_permutation, is_permutation

from ga_test_utils import BURMA4, SQUARE, random_cost_model


class TestCostModel(unittest.TestCase):
    """Koszt trasy i kontrakt CostModel"""

    def setUp(self):
        self.square = CostModel(SQUARE)

    def test_square_perimeter(self):
        """Trasa po obwodzie kwadratu omija przekątne -> 4.0"""
        self.assertAlmostEqual(self.square.tour_cost([0, 1, 2, 3]), 4.0)

    def test_square_with_diagonals(self):
        self.assertAlmostEqual(self.square.tour_cost([0, 2, 1, 3]), 2.0 + 2.0 * math.sqrt(2.0))

    def test_closing_edge_is_counted(self):
        cm = CostModel(BURMA4)
        self.assertEqual(cm.tour_cost([2, 0, 1, 3]), 289.0 + 510.0 + 153.0 + 664.0)

    def test_accepts_chromosome(self):
        ch = Chromosome([3, 2, 1, 0])
        self.assertAlmostEqual(self.square.tour_cost(ch), 4.0)

    def test_rotation_and_reversal_do_not_change_cost(self):
        cm = random_cost_model(9, seed=3)
        route = np.array([4, 1, 7, 0, 8, 2, 6, 3, 5])
        base = cm.tour_cost(route)
        self.assertAlmostEqual(cm.tour_cost(np.roll(route, 3)), base)
        self.assertAlmostEqual(cm.tour_cost(route[::-1]), base)

    def test_invalid_tours_rejected(self):
        for bad in ([0, 1, 2], [0, 1, 1, 3], [0, 1, 2, 4], [0, 1, 2, 3, 0], [-1, 0, 1, 2]):
            with self.subTest(route=bad):
                with self.assertRaises(InvalidTourError):
                    self.square.tour_cost(bad)

    def test_matrix_is_read_only(self):
        with self.assertRaises(ValueError):
            self.square.matrix[0, 1] = 5.0

    def test_non_square_matrix_fails_closed(self):
        with self.assertRaises(InputDataError):
            CostModel([[0.0, 1.0, 2.0], [1.0, 0.0, 3.0]])

    def test_single_city_rejected(self):
        with self.assertRaises(InputDataError):
            CostModel([[0.0]])

    def test_n_cities(self):
        self.assertEqual(self.square.n_cities, 4)
        self.assertEqual(len(self.square), 4)


class TestPermutationHelpers(unittest.TestCase):

    def test_is_permutation(self):
        self.assertTrue(is_permutation([2, 0, 1], 3))
        self.assertFalse(is_permutation([2, 2, 1], 3))
        self.assertFalse(is_permutation([0.0, 1.0, 2.0], 3))
        self.assertFalse(is_permutation([[0, 1], [1, 0]], 2))

    def test_check_permutation_raises(self):
        with self.assertRaises(InvalidTourError):
            check_permutation([0, 0], 2)


if __name__ == "__main__":
    unittest.main()
