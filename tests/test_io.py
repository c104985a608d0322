# -*- coding: utf-8 -*-
"""
Short test script for reading and writing configurations and picks.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

import pathlib
import tempfile
import unittest

import numpy as np
from obspy import UTCDateTime

from filterpicker.export.to_obspy import picks_to_obspy
from filterpicker.io import (
    PICK_COLUMNS,
    config_from_parameters,
    picks_to_dataframe,
    read_config,
    read_parameters,
    read_picks,
    write_picks,
)
from filterpicker.signal.pickers import PickRecord, Polarity


def _picks():
    return [
        PickRecord(
            begin_index=100.0,
            end_index=110.0,
            polarity=Polarity.POSITIVE,
            amplitude=23.456789,
            period=0.5,
            n_samples_up_event_used=12,
            band_trigger_values=(23.456789, 4.0),
            band_max_in_window=(30.0, 12.0),
            trigger_band=0,
            frequency_low=1.25,
            frequency_high=4.0,
            delta=0.01,
        ),
        PickRecord(
            begin_index=-20.0,
            end_index=-4.0,
            polarity=Polarity.UNKNOWN,
            amplitude=11.0,
            period=1.0,
            n_samples_up_event_used=40,
            band_trigger_values=(3.0, 11.0),
            band_max_in_window=(8.0, 15.0),
            trigger_band=1,
            frequency_low=0.6,
            frequency_high=1.8,
            delta=0.01,
        ),
    ]


class PicksIOTests(unittest.TestCase):
    """Suite of tests to check the tabulation and output of picks."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = pathlib.Path(self.tmpdir.name)
        self.starttime = UTCDateTime(2024, 1, 1)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_picks_to_dataframe(self):
        """Confirm the pick table."""

        print("Testing tabulation of picks.")
        picks = picks_to_dataframe(_picks(), self.starttime, "XX.TEST..HHZ")

        print("\t1: Assert columns...")
        self.assertEqual(list(picks.columns), PICK_COLUMNS)

        print("\t2: Assert pick index, time and error...")
        first = picks.iloc[0]
        self.assertEqual(first["PickIndex"], 105.0)
        self.assertEqual(UTCDateTime(first["PickTime"]), self.starttime + 1.05)
        self.assertAlmostEqual(first["PickError"], 0.1)
        self.assertEqual(first["Polarity"], "up")
        self.assertEqual((first["FreqLow"], first["FreqHigh"]), (1.25, 4.0))

        print("\t3: Assert picks from an earlier block have earlier times...")
        self.assertLess(UTCDateTime(picks.iloc[1]["PickTime"]), self.starttime)
        self.assertTrue(picks_to_dataframe([], self.starttime).empty)
        self.assertTrue(np.array_equal(_picks()[0].triggered_bands(10.0), [0, 1]))
        print("\t   ...passed!")

    def test_write_read_picks(self):
        """Confirm picks written to file are read back."""

        print("Testing writing and reading of .picks files.")
        picks = picks_to_dataframe(_picks(), self.starttime, "XX.TEST..HHZ")
        fname = self.path / "out" / "test.picks"
        write_picks(picks, fname)

        print("\t1: Assert amplitude written to 3 significant figures...")
        self.assertIn("23.5", fname.read_text())

        read = read_picks(fname)
        print("\t2: Assert times and polarities are read back...")
        self.assertEqual(read.iloc[0]["PickTime"], self.starttime + 1.05)
        self.assertEqual(list(read["Polarity"]), ["up", ""])
        self.assertTrue(np.allclose(read["Period"], [0.5, 1.0]))
        self.assertTrue(np.allclose(read["FreqLow"], [1.25, 0.6]))
        self.assertTrue(np.allclose(read["FreqHigh"], [4.0, 1.8]))
        print("\t   ...passed!")

    def test_picks_to_obspy(self):
        """Confirm the conversion to ObsPy Pick objects."""

        print("Testing export of picks to ObsPy.")
        picks = picks_to_dataframe(_picks(), self.starttime, "XX.TEST..HHZ")
        obspy_picks = picks_to_obspy(picks, phase_hint="P")

        self.assertEqual(len(obspy_picks), 2)
        pick = obspy_picks[0]
        self.assertEqual(pick.time, self.starttime + 1.05)
        self.assertAlmostEqual(pick.time_errors.uncertainty, 0.1)
        self.assertEqual(pick.polarity, "positive")
        self.assertEqual(pick.evaluation_mode, "automatic")
        self.assertEqual(pick.waveform_id.station_code, "TEST")
        self.assertEqual(pick.phase_hint, "P")
        self.assertEqual(pick.extra.period["value"], 0.5)
        self.assertEqual(pick.extra.freq_low["value"], 1.25)
        self.assertEqual(pick.extra.freq_high["value"], 4.0)
        self.assertEqual(obspy_picks[1].polarity, "undecidable")

        print("\t1: Assert picks without times are skipped...")
        self.assertEqual(picks_to_obspy(picks_to_dataframe(_picks())), [])
        print("\t   ...passed!")


class ConfigIOTests(unittest.TestCase):
    """Suite of tests to check reading of .toml configuration files."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = pathlib.Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_read_config(self):
        print("Testing reading of .toml configuration files.")
        fname = self.path / "picker.toml"
        fname.write_text(
            "[picker]\n"
            'bands = "0.1#0.2#0.4"\n'
            "threshold1 = 12.0\n"
            "t_up_event = 0.5\n"
            "t_up_event_min = 0.1\n"
        )
        config = read_config(fname)
        self.assertEqual(config.threshold1, 12.0)
        self.assertEqual(len(config.bands), 3)
        self.assertAlmostEqual(config.bandwidth_factor, 2.0)

        print("\t1: Assert the default configuration file is valid...")
        default = pathlib.Path(__file__).parents[1] / "filterpicker" / "assets"
        config = read_config(default / "filterpicker.toml")
        self.assertEqual(config.filter_window, 10.0)

        print("\t2: Assert a file without a [picker] table is rejected...")
        fname.write_text("threshold1 = 12.0\n")
        with self.assertRaises(KeyError):
            read_config(fname)

        print("\t3: Assert the log level is read from the same contents...")
        fname.write_text('log_level = "debug"\n\n[picker]\nthreshold1 = 12.0\n')
        parameters = read_parameters(fname)
        self.assertEqual(parameters["log_level"], "debug")
        self.assertEqual(config_from_parameters(parameters).threshold1, 12.0)
        print("\t   ...passed!")


if __name__ == "__main__":
    unittest.main()
