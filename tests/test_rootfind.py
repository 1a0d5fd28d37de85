"""
Tests for the bisection root finder
"""

import unittest

from roastpred.rootfind import bisect_root


class TestBisectRoot(unittest.TestCase):

    def test_simple_root(self):
        result = bisect_root(lambda x: x - 3.0, 0.0, 10.0)
        self.assertTrue(result["converged"])
        self.assertAlmostEqual(result["root"], 3.0, places=8)
        self.assertLessEqual(abs(result["residual"]), 1e-9)
        self.assertEqual(result["expansions"], 0)

    def test_decreasing_function(self):
        result = bisect_root(lambda x: 2.0 - x, -10.0, 10.0)
        self.assertTrue(result["converged"])
        self.assertAlmostEqual(result["root"], 2.0, places=8)

    def test_bracket_expansion(self):
        # [0, 10] grows about its midpoint until it reaches 100
        result = bisect_root(lambda x: x - 100.0, 0.0, 10.0)
        self.assertTrue(result["converged"])
        self.assertEqual(result["expansions"], 5)
        self.assertAlmostEqual(result["root"], 100.0, places=8)

    def test_expansion_limit(self):
        result = bisect_root(lambda x: x * x + 1.0, -1.0, 1.0)
        self.assertFalse(result["converged"])
        self.assertEqual(result["expansions"], 6)
        self.assertEqual(result["iterations"], 0)

    def test_no_sign_change_returns_closer_end(self):
        result = bisect_root(lambda x: x + 1000.0, 0.0, 1.0, max_expansions=0)
        self.assertFalse(result["converged"])
        self.assertEqual(result["root"], 0.0)

    def test_iteration_cap(self):
        result = bisect_root(lambda x: x - 1.0 / 3.0, 0.0, 1.0, tol=1e-30, max_iter=10)
        self.assertFalse(result["converged"])
        self.assertEqual(result["iterations"], 10)
        self.assertAlmostEqual(result["root"], 1.0 / 3.0, places=2)

    def test_root_on_bracket_edge(self):
        result = bisect_root(lambda x: x, 0.0, 1.0)
        self.assertTrue(result["converged"])
        self.assertEqual(result["root"], 0.0)
        self.assertEqual(result["iterations"], 0)

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            bisect_root(lambda x: x, 1.0, 0.0)
        with self.assertRaises(ValueError):
            bisect_root(lambda x: x, 0.0, 1.0, tol=0.0)
        with self.assertRaises(ValueError):
            bisect_root(lambda x: x, 0.0, 1.0, growth=1.0)


if __name__ == '__main__':
    unittest.main()
