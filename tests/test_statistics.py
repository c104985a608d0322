# -*- coding: utf-8 -*-
"""
Short test script for the decaying band statistics.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

import unittest

import numpy as np

from filterpicker.signal.onsets import AdaptiveStatistics


class AdaptiveStatisticsTests(unittest.TestCase):
    """Suite of tests to check the band statistics are working as expected."""

    def test_initial_state(self):
        print("Testing initial band statistics.")
        stats = AdaptiveStatistics(3, 0.01, 30.0, 10.0)
        self.assertAlmostEqual(stats.factor, 0.01 / 30.0)
        self.assertEqual(stats.n_enable_triggering, 3001)
        self.assertTrue(np.array_equal(stats.std_xrec, [50.0, 50.0, 50.0]))
        self.assertTrue(np.array_equal(stats.uncertainty_threshold, [5.0, 5.0, 5.0]))
        print("\t   ...passed!")

    def test_constant_input(self):
        """Confirm the mean decays towards a constant input."""

        print("Testing band statistics on a constant input.")
        stats = AdaptiveStatistics(2, 0.1, 1.0, 10.0)
        n = 50
        for _ in range(n):
            stats.update(np.array([2.0, 4.0]), 0.0)

        print("\t1: Assert mean follows 1 - (1 - factor)^n...")
        expected = np.array([2.0, 4.0]) * (1.0 - 0.9**n)
        self.assertTrue(np.allclose(stats.mean_xrec, expected))

        print("\t2: Assert standard deviation is the root of the variance...")
        self.assertTrue(np.allclose(stats.std_xrec**2, stats.var_xrec))
        print("\t   ...passed!")

    def test_uncertainty_threshold_bounds(self):
        """Confirm the uncertainty threshold is kept within [-0.5, threshold1 / 2]."""

        print("Testing uncertainty threshold bounds.")
        stats = AdaptiveStatistics(1, 0.1, 1.0, 10.0)
        for _ in range(200):
            stats.update(np.zeros(1), np.array([100.0]))
        self.assertAlmostEqual(stats.uncertainty_threshold[0], 5.0)
        for _ in range(200):
            stats.update(np.zeros(1), np.array([-100.0]))
        self.assertAlmostEqual(stats.uncertainty_threshold[0], -0.5)
        print("\t   ...passed!")


if __name__ == "__main__":
    unittest.main()
