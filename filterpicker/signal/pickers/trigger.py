# -*- coding: utf-8 -*-
"""
Trigger logic of the picker: the circular histories of the characteristic function
with their running windowed integrals, and the state machine that arms, accepts and
locks out picks.

A pick is declared when, while new picks are allowed, the integral of the clipped
characteristic function over the last `t_up_event` seconds reaches
`threshold2 * t_up_event`. The trigger window is then scanned oldest sample first for
the first sample at which the characteristic function reached threshold1, the short
integral over `t_up_event_min` seconds reached `threshold1 * t_up_event_min`, and the
pick uncertainty window does not overlap that of the previous pick.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

import filterpicker.util as util
from filterpicker.core import RingBuffer
from .pickdata import PickRecord
from .polarity import PolarityEstimator


# The gate arms only while the uncertainty CF of every band is above this level
MAX_ALLOW_NEW_PICK_THRESHOLD = util.FLOAT_MIN_NORMAL
# Minimum width of the pick uncertainty window, as a fraction of the trigger period
MIN_FRACTION_PERIOD_UNCERTAINTY = 4.0
# Maximum width of the pick uncertainty window, in trigger periods
MAX_PERIODS_UNCERTAINTY = 2.0


class TriggerWindowBuffer:
    """
    Circular histories of the characteristic function and of the quantities needed to
    confirm a pick and estimate its uncertainty and polarity.

    Every call to :meth:`push` advances all histories by exactly one sample.

    Parameters
    ----------
    n_bands : int
        Number of filter bands.
    n_sample_memory : int
        Capacity of the histories, in samples.
    n_t_up_event : int
        Length of the trigger integral window, in samples.
    n_t_up_event_min : int
        Length of the short confirmation integral window, in samples.

    Attributes
    ----------
    cf_value : :class:`~filterpicker.core.RingBuffer`
        Unclipped CF of each band.
    index_uncertainty : :class:`~filterpicker.core.RingBuffer`
        For each band, the last sample index at which the uncertainty CF rose past
        the band's uncertainty threshold.
    polarity_derivative, polarity_abs_derivative : :class:`RingBuffer`
        Derivative of each band's filtered signal, and its absolute value.
    cf_clipped : :class:`~filterpicker.core.RingBuffer`
        Clipped cross-band maximum CF (zero before triggering is enabled).
    cf_max : :class:`~filterpicker.core.RingBuffer`
        Unclipped cross-band maximum CF (zero before triggering is enabled).
    band_cf_max : :class:`~filterpicker.core.RingBuffer`
        Band that produced the cross-band maximum.
    longest_band_triggered : :class:`~filterpicker.core.RingBuffer`
        Longest-period band with a CF >= threshold1, or -1.
    integral, integral_short : :class:`~filterpicker.core.RingBuffer`
        Running sums of `cf_clipped` over the last `n_t_up_event` and
        `n_t_up_event_min` samples.

    """

    def __init__(self, n_bands, n_sample_memory, n_t_up_event, n_t_up_event_min):
        if not 1 <= n_t_up_event_min <= n_t_up_event < n_sample_memory:
            raise ValueError(
                f"Inconsistent trigger windows: n_t_up_event_min={n_t_up_event_min}, "
                f"n_t_up_event={n_t_up_event}, n_sample_memory={n_sample_memory}."
            )

        self.n_bands = n_bands
        self.n_sample_memory = n_sample_memory
        self.n_t_up_event = n_t_up_event
        self.n_t_up_event_min = n_t_up_event_min

        bands = (n_bands,)
        self.cf_value = RingBuffer(n_sample_memory, bands, fill=-1.0)
        self.index_uncertainty = RingBuffer(n_sample_memory, bands, dtype=np.int64)
        self.polarity_derivative = RingBuffer(n_sample_memory, bands)
        self.polarity_abs_derivative = RingBuffer(n_sample_memory, bands)
        self.cf_clipped = RingBuffer(n_sample_memory)
        self.cf_max = RingBuffer(n_sample_memory)
        self.band_cf_max = RingBuffer(n_sample_memory, dtype=np.int64)
        self.longest_band_triggered = RingBuffer(n_sample_memory, dtype=np.int64)
        self.integral = RingBuffer(n_sample_memory)
        self.integral_short = RingBuffer(n_sample_memory)

        self.cf_uncertainty_last = np.zeros(n_bands)

    def push(self, index, cf, uncertainty_threshold, derivative, enabled):
        """
        Append the current sample to every history.

        Parameters
        ----------
        index : int
            Sample index of the current sample (relative to the current block).
        cf : :class:`~filterpicker.signal.onsets.charfunc.CharacteristicFunction`
            Characteristic function of the current sample.
        uncertainty_threshold : `numpy.ndarray`
            Current uncertainty threshold of each band.
        derivative : `numpy.ndarray`
            Change in each band's filtered signal since the previous sample.
        enabled : bool
            Whether triggering is enabled. Before that, zeros are stored in place of
            the cross-band CF and its integrals.

        Returns
        -------
        cf_uncertainty : `numpy.ndarray`
            Uncertainty CF of each band for the current sample (the clipped cross-band
            maximum, shared by every band).

        """

        cf_uncertainty = np.full(self.n_bands, cf.clipped_maximum)
        rising = (self.cf_uncertainty_last < uncertainty_threshold) & (
            cf_uncertainty >= uncertainty_threshold
        )
        self.cf_uncertainty_last = cf_uncertainty
        self.index_uncertainty.push(
            np.where(rising, index, self.index_uncertainty.at(0))
        )

        self.cf_value.push(cf.values)
        self.band_cf_max.push(cf.band_max)
        self.longest_band_triggered.push(cf.longest_band_triggered)
        self.polarity_derivative.push(derivative)
        self.polarity_abs_derivative.push(np.abs(derivative))

        if enabled:
            clipped_max = cf.clipped_maximum
            # Values leaving the windows, addressed before the pointer advances
            leaving = self.cf_clipped.at(self.n_t_up_event - 1)
            leaving_short = self.cf_clipped.at(self.n_t_up_event_min - 1)
            self.integral.push(self.integral.at(0) - leaving + clipped_max)
            self.integral_short.push(
                self.integral_short.at(0) - leaving_short + clipped_max
            )
            self.cf_clipped.push(clipped_max)
            self.cf_max.push(cf.maximum)
        else:
            self.integral.push(0.0)
            self.integral_short.push(0.0)
            self.cf_clipped.push(0.0)
            self.cf_max.push(0.0)

        return cf_uncertainty

    def rebase(self, n_samples):
        """Shift every stored sample index back by `n_samples` at the end of a block."""
        self.index_uncertainty.values -= n_samples


class GateState(Enum):
    """State of the pick gate."""

    GATED = "gated"
    ARMED = "armed"
    LOCKED = "locked"


class PickStateMachine:
    """
    Decides, once per sample, whether a pick is accepted, and builds its record.

    Parameters
    ----------
    buffer : :class:`TriggerWindowBuffer`
        Histories of the characteristic function.
    filter_bank : :class:`~filterpicker.signal.filters.BandFilterBank`
        Filter bank, used for band periods and phase-shift correction.
    threshold1 : float
        Trigger threshold.
    threshold2 : float
        Confirmation threshold.
    logger : `logging.Logger`, optional
        Logger used to report accepted picks.

    Attributes
    ----------
    allow_new_pick_index : int or None
        Sample index from which a new trigger window may open, or None while new
        picks are not allowed. After a pick the gate re-arms at the first sample at
        which the uncertainty CF of every band is positive.
    can_allow_new_pick_index : int
        Trigger index of the previous pick. The uncertainty window of a new pick must
        begin strictly after it.
    state : :class:`GateState`
        Current state of the gate.

    """

    def __init__(self, buffer, filter_bank, threshold1, threshold2, logger=None):
        self.buffer = buffer
        self.filter_bank = filter_bank
        self.periods = filter_bank.periods
        self.delta = filter_bank.delta
        self.threshold1 = threshold1
        self.threshold2 = threshold2
        self.logger = logger or logging.getLogger("filterpicker")

        self.critical_integral = buffer.n_t_up_event * threshold2
        self.critical_integral_short = threshold1 * buffer.n_t_up_event_min
        self.polarity = PolarityEstimator(buffer, self.periods, self.delta)

        self.allow_new_pick_index = None
        self.can_allow_new_pick_index = -1
        self.state = GateState.GATED

    def step(self, now, cf_uncertainty):
        """
        Evaluate the trigger logic for the current sample.

        Parameters
        ----------
        now : int
            Sample index of the current sample.
        cf_uncertainty : `numpy.ndarray`
            Current uncertainty CF of each band.

        Returns
        -------
        pick : :class:`~filterpicker.signal.pickers.pickdata.PickRecord` or None
            The pick accepted at this sample, if any.

        """

        pick = None
        if (
            self.allow_new_pick_index is not None
            and self.buffer.integral.at(0) >= self.critical_integral
        ):
            pick = self._scan(now)

        if pick is not None:
            self.state = GateState.LOCKED
        elif self.allow_new_pick_index is None:
            if np.all(cf_uncertainty > MAX_ALLOW_NEW_PICK_THRESHOLD):
                self.allow_new_pick_index = now
                self.state = GateState.ARMED
            else:
                self.state = GateState.GATED

        return pick

    def _scan(self, now):
        """Scan the trigger window for the first sample that confirms a pick."""

        buffer = self.buffer
        start = max(now - buffer.n_t_up_event + 1, self.allow_new_pick_index + 1)
        n = now - start + 1
        if n < 1:
            return None

        # Window histories, oldest first: row i holds sample start + i
        cf_max = buffer.cf_max.last(n)
        integral_short = buffer.integral_short.last(n)
        band_cf_max = buffer.band_cf_max.last(n)
        index_uncertainty = buffer.index_uncertainty.last(n)

        for i in np.flatnonzero(cf_max >= self.threshold1):
            # Short integral checked up to, but excluding, the current sample
            end = min(i + buffer.n_t_up_event_min, n - 1)
            if end <= i or not np.any(
                integral_short[i:end] >= self.critical_integral_short
            ):
                continue

            band = int(band_cf_max[i])
            trigger = start + int(i)
            uncertainty = int(index_uncertainty[i, band])
            max_uncertainty = int(
                MAX_PERIODS_UNCERTAINTY * self.periods[band] / self.delta
            )
            if trigger - uncertainty > max_uncertainty:
                uncertainty = trigger - max_uncertainty
            if uncertainty > self.can_allow_new_pick_index:
                return self._accept(now, start, int(i), band, trigger, uncertainty)

        return None

    def _accept(self, now, start, i, band, trigger, uncertainty):
        """Lock the gate and build the record of a pick triggered at `trigger`."""

        n = now - start + 1
        cf_window = self.buffer.cf_value.last(n)[i:]
        trigger_values = cf_window[0]
        max_in_window = cf_window.max(axis=0)
        triggered = (cf_window > self.threshold1).any(axis=0)

        self.can_allow_new_pick_index = trigger
        self.allow_new_pick_index = None

        # Shortest-period band that triggered sets the filter phase shift
        above = np.flatnonzero(trigger_values > self.threshold1)
        shortest = int(above[0]) if above.size else band
        shift = self.filter_bank.phase_shift(self.periods[shortest])
        trigger_index = trigger - shift
        uncertainty_index = uncertainty - shift

        half_uncertainty = (trigger_index - uncertainty_index) // 2
        polarity = self.polarity.estimate(
            band, (now - trigger) + half_uncertainty, half_uncertainty, triggered
        )

        # Passband spanned by the bands that triggered
        bands = np.flatnonzero(triggered) if triggered.any() else np.array([band])
        f_low, f_high = self.filter_bank.corners()

        period = float(self.periods[band])
        begin, end = uncertainty_index, trigger_index
        width = self.delta * (end - begin)
        if width < period / MIN_FRACTION_PERIOD_UNCERTAINTY:
            min_width = period / MIN_FRACTION_PERIOD_UNCERTAINTY
            ishift = int(0.5 * (min_width - width) / self.delta)
            begin -= ishift
            end += ishift

        pick = PickRecord(
            begin_index=float(begin),
            end_index=float(end),
            polarity=polarity,
            amplitude=float(trigger_values[band]),
            period=period,
            n_samples_up_event_used=now - trigger + 1,
            band_trigger_values=tuple(float(v) for v in trigger_values),
            band_max_in_window=tuple(float(v) for v in max_in_window),
            trigger_band=band,
            frequency_low=float(f_low[bands].min()),
            frequency_high=float(f_high[bands].max()),
            delta=self.delta,
        )
        self.logger.debug(
            f"\t\tPick accepted at sample {now}: begin={pick.begin_index:g}, "
            f"end={pick.end_index:g}, T={period:g} s, amplitude={pick.amplitude:.3g}, "
            f"polarity={polarity.name}"
        )

        return pick

    def rebase(self, n_samples):
        """Shift the gate indices back by `n_samples` at the end of a block."""
        if self.allow_new_pick_index is not None:
            self.allow_new_pick_index -= n_samples
        self.can_allow_new_pick_index -= n_samples
