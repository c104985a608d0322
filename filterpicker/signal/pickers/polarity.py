# -*- coding: utf-8 -*-
"""
First-motion polarity of a pick, from a vote across the bands that triggered.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

import numpy as np

import filterpicker.util as util
from .pickdata import Polarity


# Minimum |sum(derivative)| / sum(|derivative|) for a band to vote
POLARITY_QUALITY_CUTOFF = 0.667


class PolarityEstimator:
    """
    Weighted multi-band first-motion polarity vote.

    For each band that triggered, the derivative of the filtered signal is summed over
    a short window centred on the pick. If the summed derivative is mostly of one sign
    (|ratio| > 0.667) the band votes +1 or -1, weighted by how close its period is to
    that of the triggering band.

    Parameters
    ----------
    buffer : :class:`~filterpicker.signal.pickers.trigger.TriggerWindowBuffer`
        History of the per-band derivative of the filtered signal.
    periods : `numpy.ndarray`
        Band centre periods, in seconds.
    delta : float
        Sample interval of the data, in seconds.

    """

    def __init__(self, buffer, periods, delta):
        self.buffer = buffer
        self.periods = np.asarray(periods, dtype=float)
        self.delta = delta

    def estimate(self, trigger_band, pick_offset, half_uncertainty, triggered):
        """
        Estimate the polarity of a pick.

        Parameters
        ----------
        trigger_band : int
            Index of the band with the largest characteristic function at the trigger.
        pick_offset : int
            Number of samples back from the current sample to the pick point (in the
            filtered, not phase-shift corrected, signal).
        half_uncertainty : int
            Half the width of the pick uncertainty window, in samples.
        triggered : `numpy.ndarray` of bool
            Bands whose characteristic function exceeded threshold1 in the trigger
            window.

        Returns
        -------
        polarity : :class:`~filterpicker.signal.pickers.pickdata.Polarity`

        """

        derivative = self.buffer.polarity_derivative
        abs_derivative = self.buffer.polarity_abs_derivative
        capacity = derivative.capacity
        trigger_period = self.periods[trigger_band]

        polarity_sum = 0.0
        weight_sum = 0.0
        for band in np.flatnonzero(triggered):
            period = self.periods[band]
            half_width = int(period / self.delta / 4.0)
            half_width = min(half_width, half_uncertainty + 1, capacity // 2)
            half_width = max(half_width, 2)

            newest = max(pick_offset - half_width, 0)
            oldest = min(pick_offset + half_width, capacity - 1)
            if oldest < newest:
                continue
            n = oldest - newest + 1
            deriv_sum = derivative.last(n, newest)[:, band].sum()
            abs_sum = abs_derivative.last(n, newest)[:, band].sum()

            if abs(abs_sum) <= util.FLOAT_MIN_NORMAL:
                continue
            ratio = deriv_sum / abs_sum
            if ratio > POLARITY_QUALITY_CUTOFF:
                vote = 1
            elif ratio < -POLARITY_QUALITY_CUTOFF:
                vote = -1
            else:
                continue

            weight = min(period / trigger_period, trigger_period / period)
            polarity_sum += vote * weight
            weight_sum += weight

        if weight_sum > util.FLOAT_MIN_NORMAL:
            if polarity_sum / weight_sum > 0.0:
                return Polarity.POSITIVE
            if polarity_sum / weight_sum < 0.0:
                return Polarity.NEGATIVE

        return Polarity.UNKNOWN
