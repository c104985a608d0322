# -*- coding: utf-8 -*-
"""
Short test script for the trigger histories and the pick state machine.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

import unittest

import numpy as np

from filterpicker.signal.filters import BandFilterBank
from filterpicker.signal.onsets import CharacteristicFunction
from filterpicker.signal.pickers import (
    GateState,
    PickStateMachine,
    Polarity,
    TriggerWindowBuffer,
)


def _cf(values, clip=50.0):
    """Build the characteristic function of a sample from per-band values."""

    values = np.asarray(values, dtype=float)
    band_max = len(values) - 1 - int(np.argmax(values[::-1]))
    triggered = np.flatnonzero(values >= 10.0)
    return CharacteristicFunction(
        values=values,
        clipped=np.minimum(values, clip),
        xrec=np.zeros(len(values)),
        maximum=float(values[band_max]),
        clipped_maximum=float(min(values[band_max], clip)),
        band_max=band_max,
        longest_band_triggered=int(triggered[-1]) if triggered.size else -1,
        skipped=np.zeros(len(values), dtype=bool),
    )


# Per-band CF values before and during a toy onset
QUIET = [[1.0, 0.5]]
ONSET = [[20.0, 15.0]]


class TriggerWindowBufferTests(unittest.TestCase):
    """Suite of tests to check the trigger histories."""

    def test_window_sizes(self):
        with self.assertRaises(ValueError):
            TriggerWindowBuffer(2, 10, 10, 3)
        with self.assertRaises(ValueError):
            TriggerWindowBuffer(2, 20, 5, 6)

    def test_running_integrals(self):
        """Confirm the windowed integrals of the clipped characteristic function."""

        print("Testing running integrals of the characteristic function.")
        buffer = TriggerWindowBuffer(2, 20, 5, 2)
        threshold = np.full(2, 5.0)
        derivative = np.zeros(2)

        print("\t1: Assert nothing is integrated before triggering is enabled...")
        for index in range(3):
            buffer.push(index, _cf([3.0, 1.0]), threshold, derivative, False)
        self.assertEqual(buffer.integral.at(0), 0.0)
        self.assertEqual(buffer.cf_clipped.at(0), 0.0)

        print("\t2: Assert integrals over the trigger and short windows...")
        for n, index in enumerate(range(3, 13), start=1):
            buffer.push(index, _cf([3.0, 1.0]), threshold, derivative, True)
            self.assertAlmostEqual(buffer.integral.at(0), 3.0 * min(n, 5))
            self.assertAlmostEqual(buffer.integral_short.at(0), 3.0 * min(n, 2))

        print("\t3: Assert clipping is applied to the integrated values...")
        buffer.push(13, _cf([80.0, 1.0]), threshold, derivative, True)
        self.assertAlmostEqual(buffer.integral.at(0), 4 * 3.0 + 50.0)
        self.assertAlmostEqual(buffer.cf_max.at(0), 80.0)
        print("\t   ...passed!")

    def test_uncertainty_index(self):
        """Confirm the index at which the CF rose past the uncertainty threshold."""

        print("Testing latching of the uncertainty index.")
        buffer = TriggerWindowBuffer(1, 20, 5, 2)
        threshold = np.full(1, 5.0)
        derivative = np.zeros(1)
        for index, value in enumerate([0.0, 1.0, 6.0, 7.0, 2.0, 8.0]):
            buffer.push(index, _cf([value]), threshold, derivative, True)
        latched = buffer.index_uncertainty.last(6)[:, 0]
        self.assertTrue(np.array_equal(latched, [0, 0, 2, 2, 2, 5]))

        print("\t1: Assert stored indices are rebased at the end of a block...")
        buffer.rebase(6)
        self.assertEqual(buffer.index_uncertainty.at(0)[0], -1)
        print("\t   ...passed!")


class PickStateMachineTests(unittest.TestCase):
    """Suite of tests to check the pick state machine on a toy case."""

    def setUp(self):
        self.buffer = TriggerWindowBuffer(2, 100, 11, 3)
        self.filter_bank = BandFilterBank([0.1, 0.125], 1.25, 0.01)
        self.gate = PickStateMachine(self.buffer, self.filter_bank, 10.0, 8.0)
        self.threshold = np.full(2, 5.0)

    def _step(self, index, values):
        cf = _cf(values)
        cf_uncertainty = self.buffer.push(index, cf, self.threshold, np.ones(2), True)
        return self.gate.step(index, cf_uncertainty)

    def _run(self, sequence):
        """Step the gate through a sequence of per-band CF values."""
        picks = []
        for index, values in enumerate(sequence):
            pick = self._step(index, values)
            if pick is not None:
                picks.append((index, pick))
        return picks

    def test_arming(self):
        """Confirm the gate arms only once the characteristic function is positive."""

        print("Testing arming of the pick gate.")
        self.assertIsNone(self._step(0, [0.0, -1.0]))
        self.assertEqual(self.gate.state, GateState.GATED)
        self.assertIsNone(self.gate.allow_new_pick_index)

        self.assertIsNone(self._step(1, [3.0, 1.0]))
        self.assertEqual(self.gate.state, GateState.ARMED)
        self.assertEqual(self.gate.allow_new_pick_index, 1)

        print("\t1: Assert gate indices are rebased at the end of a block...")
        self.gate.rebase(2)
        self.assertEqual(self.gate.allow_new_pick_index, -1)
        self.assertEqual(self.gate.can_allow_new_pick_index, -3)
        print("\t   ...passed!")

    def test_toy_pick(self):
        """Confirm a pick on a step in the characteristic function."""

        print("Testing pick state machine on toy case.")
        accepted = self._run(QUIET * 5 + ONSET * 15)

        print("\t1: Assert exactly one pick, confirmed when the integral is reached...")
        self.assertEqual(len(accepted), 1)
        now, pick = accepted[0]
        self.assertEqual(now, 9)

        print("\t2: Assert phase-shift corrected and widened uncertainty window...")
        self.assertEqual(pick.begin_index, 2.0)
        self.assertEqual(pick.end_index, 4.0)
        self.assertEqual(pick.pick_index, 3.0)

        print("\t3: Assert pick attributes...")
        self.assertEqual(pick.n_samples_up_event_used, 5)
        self.assertEqual(pick.amplitude, 20.0)
        self.assertAlmostEqual(pick.period, 0.1)
        self.assertEqual(pick.trigger_band, 0)
        self.assertEqual(pick.band_trigger_values, (20.0, 15.0))
        self.assertEqual(pick.polarity, Polarity.POSITIVE)

        print("\t4: Assert the passband spans both triggered bands...")
        self.assertAlmostEqual(pick.frequency_low, 8.0 / 1.25**1.5)
        self.assertAlmostEqual(pick.frequency_high, 10.0 * 1.25**1.5)

        print("\t5: Assert the gate re-arms but the same onset is not picked again...")
        self.assertEqual(self.gate.allow_new_pick_index, 10)
        self.assertEqual(self.gate.can_allow_new_pick_index, 5)
        print("\t   ...passed!")

    def test_successive_picks(self):
        """Confirm a second onset is picked after the gate re-arms, in order."""

        print("Testing successive picks.")
        picks = self._run(QUIET * 5 + ONSET * 15 + QUIET * 10 + ONSET * 15)

        print("\t1: Assert one pick per onset...")
        self.assertEqual([now for now, _ in picks], [9, 34])

        print("\t2: Assert the uncertainty windows are ordered and disjoint...")
        first, second = picks[0][1], picks[1][1]
        self.assertEqual((second.begin_index, second.end_index), (27.0, 29.0))
        self.assertGreater(second.begin_index, first.end_index)
        print("\t   ...passed!")

    def test_earliest_candidate_wins(self):
        """Confirm the oldest qualifying sample triggers, not the strongest."""

        print("Testing choice of the trigger sample.")
        picks = self._run(QUIET * 5 + [[12.0, 11.0]] * 3 + [[40.0, 30.0]] * 12)

        self.assertEqual(len(picks), 1)
        now, pick = picks[0]
        self.assertEqual(now, 9)
        self.assertEqual(pick.n_samples_up_event_used, 5)
        self.assertEqual(pick.amplitude, 12.0)
        self.assertEqual(pick.band_trigger_values, (12.0, 11.0))
        self.assertEqual(pick.band_max_in_window, (40.0, 30.0))
        print("\t   ...passed!")

    def test_uncertainty_clamp(self):
        """Confirm the uncertainty window is limited to two trigger periods."""

        print("Testing limit on the width of the uncertainty window.")
        picks = self._run(QUIET * 5 + [[6.0, 5.5]] * 30 + ONSET * 10)

        self.assertEqual(len(picks), 1)
        now, pick = picks[0]
        self.assertEqual(now, 36)
        self.assertEqual(pick.n_samples_up_event_used, 2)

        print("\t1: Assert the window is two periods wide, less the phase shift...")
        self.assertEqual(pick.end_index, 33.0)
        self.assertEqual(pick.begin_index, 13.0)
        self.assertAlmostEqual(pick.uncertainty, 2 * pick.period)
        print("\t   ...passed!")

    def test_overlapping_uncertainty_rejected(self):
        """Confirm no pick whose uncertainty window overlaps the previous trigger."""

        print("Testing rejection of overlapping picks.")
        self.gate.can_allow_new_pick_index = 5
        self.assertEqual(self._run(QUIET * 5 + ONSET * 15), [])
        self.assertEqual(self.gate.state, GateState.ARMED)

        print("\t1: Assert the same onset is picked after an earlier trigger...")
        self.setUp()
        self.gate.can_allow_new_pick_index = 4
        self.assertEqual([now for now, _ in self._run(QUIET * 5 + ONSET * 15)], [9])
        print("\t   ...passed!")


if __name__ == "__main__":
    unittest.main()
