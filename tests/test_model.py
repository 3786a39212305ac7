#!/usr/bin/env python3
"""
Testy walidacji konfiguracji i instancji (Pydantic -> ConfigurationError / InputDataError).
"""
import unittest

from tspga.errors import ConfigurationError, InputDataError
from tspga.model import Params, parse_instance, parse_params

from ga_test_utils import SQUARE


class TestParams(unittest.TestCase):

    def test_defaults(self):
        p = Params()
        self.assertEqual(p.population, 50)
        self.assertEqual(p.tournament, 5)
        self.assertEqual(p.crossover, "fix")
        self.assertEqual(p.mutation, "single")
        self.assertEqual(p.replacement, "worst")
        self.assertEqual(p.report.plot, "average")

    def test_valid_config(self):
        p = parse_params({"population": 10, "tournament": 10, "crossover": "ordered",
                          "mutation": "inversion", "max_generations": 100, "runs": 5})
        self.assertEqual(p.tournament, 10)
        self.assertEqual(p.runs, 5)

    def test_out_of_range_rejected(self):
        bad = [
            {"population": 9},
            {"population": 10, "tournament": 11},
            {"tournament": 0},
            {"max_generations": 0},
            {"runs": 0},
            {"swaps": 1},
            {"workers": 0},
            {"crossover": "pmx"},
            {"mutation": "scramble"},
            {"report": {"plot": "median"}},
        ]
        for data in bad:
            with self.subTest(data=data):
                with self.assertRaises(ConfigurationError):
                    parse_params(data)

    def test_configuration_error_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_params({"population": 3})


class TestInstance(unittest.TestCase):

    def test_valid(self):
        inst = parse_instance({"name": "sq", "matrix": SQUARE})
        self.assertEqual(inst.n_cities, 4)

    def test_invalid_matrices(self):
        bad = [
            [[0.0]],
            [[0.0, 1.0], [1.0]],
            [[0.0, 1.0], [2.0, 0.0]],
            [[1.0, 1.0], [1.0, 0.0]],
            [[0.0, -1.0], [-1.0, 0.0]],
        ]
        for m in bad:
            with self.subTest(matrix=m):
                with self.assertRaises(InputDataError):
                    parse_instance({"matrix": m})


if __name__ == "__main__":
    unittest.main()
