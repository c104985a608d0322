# -*- coding: utf-8 -*-
"""
Short test script for the derivation, parsing and validation of filter bands.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

import unittest

import numpy as np

import filterpicker.util as util
from filterpicker.signal import bands as fpbands
from filterpicker.signal.bands import BandParameters


class AutoBandTests(unittest.TestCase):
    """Suite of tests to check bands derived from a filter window."""

    def test_auto_bands(self):
        """Confirm auto bands for a 10 s filter window at 100 Hz."""

        print("Testing automatic band derivation.")
        bands = fpbands.auto_bands(10.0, 0.01, 1.25)
        periods = np.array([band.period for band in bands])

        print("\t1: Assert number of bands...")
        self.assertEqual(len(bands), 28)

        print("\t2: Assert first band is 1.25 x Nyquist period...")
        self.assertAlmostEqual(periods[0], 0.025)

        print("\t3: Assert bands are spaced by the bandwidth factor...")
        self.assertTrue(np.allclose(periods[1:] / periods[:-1], 1.25))
        self.assertGreaterEqual(periods[-1], 10.0)
        self.assertLess(periods[-2], 10.0)

        print("\t4: Assert scale factors are all 1...")
        self.assertTrue(all(band.threshold_scale_factor == 1.0 for band in bands))
        print("\t   ...passed!")

    def test_short_window(self):
        """A filter window shorter than the first band still gives one band."""

        bands = fpbands.auto_bands(0.01, 0.01, 1.25)
        self.assertEqual(len(bands), 1)


class BandStringTests(unittest.TestCase):
    """Suite of tests to check parsing and formatting of band strings."""

    def test_hash_form(self):
        """Confirm the '#'-separated form with units and scale factors."""

        print("Testing '#'-separated band strings.")
        bands = fpbands.parse_band_parameters("0.05#0.1/0.9#0.2s/0.8#4Hz")

        print("\t1: Assert periods...")
        self.assertTrue(
            np.allclose([band.period for band in bands], [0.05, 0.1, 0.2, 0.25])
        )

        print("\t2: Assert scale factors (default 1)...")
        self.assertEqual(
            [band.threshold_scale_factor for band in bands], [1.0, 0.9, 0.8, 1.0]
        )

        print("\t3: Assert display modes...")
        self.assertEqual(
            [band.display_mode for band in bands],
            [fpbands.PERIOD] * 3 + [fpbands.FREQUENCY],
        )
        print("\t   ...passed!")

    def test_frequency_pairs(self):
        """Confirm 'frequency,scale' pairs are sorted by increasing period."""

        print("Testing 'frequency,scale' band strings.")
        bands = fpbands.parse_band_parameters("0.5,1.:1.,1.:2.,0.5")
        self.assertTrue(np.allclose([band.period for band in bands], [0.5, 1.0, 2.0]))
        self.assertEqual(
            [band.threshold_scale_factor for band in bands], [0.5, 1.0, 1.0]
        )
        print("\t   ...passed!")

    def test_format_and_parse(self):
        """Formatted bands parse back to the same periods and scale factors."""

        print("Testing band string formatting.")
        bands = (
            BandParameters(0.1, 1.0),
            BandParameters(0.2, 0.5),
            BandParameters(0.25, 0.8, fpbands.FREQUENCY),
        )
        text = fpbands.format_band_parameters(bands)
        self.assertEqual(text, "0.1s/1.0#0.2s/0.5#4.0Hz/0.8")
        parsed = fpbands.parse_band_parameters(text)
        self.assertTrue(np.allclose([b.period for b in parsed], [0.1, 0.2, 0.25]))
        print("\t   ...passed!")

    def test_bad_string(self):
        with self.assertRaises(util.BandParameterStringException):
            fpbands.parse_band_parameters("0.1#abc")
        with self.assertRaises(util.BandParameterStringException):
            fpbands.parse_band_parameters("0.5,1.,3.:1.,1.")


class BandValidationTests(unittest.TestCase):
    """Suite of tests to check the validation of explicit bands."""

    def test_bandwidth_factor(self):
        """Confirm the bandwidth factor is the mean period ratio."""

        print("Testing bandwidth factor measurement.")
        bands = fpbands.as_band_parameters([(1.0, 1.0), (1.5, 1.0), (2.25, 1.0)])
        print("\t1: Assert regular bands give their ratio...")
        self.assertAlmostEqual(fpbands.bandwidth_factor_from_bands(bands), 1.5)

        print("\t2: Assert a single band gives the default...")
        self.assertEqual(
            fpbands.bandwidth_factor_from_bands(bands[:1]),
            fpbands.BANDWIDTH_FACTOR_DEFAULT,
        )

        print("\t3: Assert a moderately irregular band layout only warns...")
        bands = fpbands.as_band_parameters([1.0, 1.25, 1.8])
        with self.assertLogs("filterpicker", level="WARNING"):
            fpbands.bandwidth_factor_from_bands(bands)

        print("\t4: Assert a strongly irregular band layout is rejected...")
        bands = fpbands.as_band_parameters([1.0, 1.25, 2.0])
        with self.assertRaises(util.BandWidthFactorException):
            fpbands.bandwidth_factor_from_bands(bands)

        print("\t5: Assert a bandwidth factor below 1.1 is rejected...")
        bands = fpbands.as_band_parameters([1.0, 1.05, 1.1025])
        with self.assertRaises(util.BandWidthFactorException):
            fpbands.bandwidth_factor_from_bands(bands)
        print("\t   ...passed!")

    def test_band_order(self):
        bands = fpbands.as_band_parameters([1.0, 0.5])
        errors = fpbands.check_band_order(bands)
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], util.BandOrderException)

    def test_normalise_scale_factors(self):
        bands = fpbands.as_band_parameters([(1.0, 2.0), (2.0, 4.0)])
        bands = fpbands.normalise_scale_factors(bands)
        self.assertEqual([b.threshold_scale_factor for b in bands], [0.5, 1.0])

    def test_nyquist(self):
        bands = fpbands.as_band_parameters([0.015, 0.03])
        with self.assertRaises(util.NyquistException):
            fpbands.check_nyquist(bands, 0.01)
        fpbands.check_nyquist(bands[1:], 0.01)

    def test_band_corners(self):
        """Corners straddle the centre frequency and are limited to Nyquist."""

        f_low, f_high = fpbands.band_corners([1.0, 0.025], 1.25, 0.01)
        self.assertAlmostEqual(f_low[0], 1.0 / 1.25**1.5)
        self.assertAlmostEqual(f_high[0], 1.25**1.5)
        self.assertAlmostEqual(f_high[1], 50.0)


if __name__ == "__main__":
    unittest.main()
