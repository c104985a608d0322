# -*- coding: utf-8 -*-
"""
Data classes describing the picks made by the picker.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

import numpy as np
from obspy import UTCDateTime


class Polarity(Enum):
    """First-motion polarity of a pick."""

    POSITIVE = 1
    NEGATIVE = -1
    UNKNOWN = 0

    @property
    def obspy(self) -> str:
        """Polarity as an ObsPy `PickPolarity` value."""
        return {1: "positive", -1: "negative", 0: "undecidable"}[self.value]

    @property
    def label(self) -> str:
        """Short "up"/"down" label, or "" if unknown."""
        return {1: "up", -1: "down", 0: ""}[self.value]


@dataclass(frozen=True)
class PickRecord:
    """
    A single accepted pick.

    Sample positions are relative to the first sample of the block passed to the
    :meth:`~filterpicker.signal.pickers.filterpicker.FilterPicker.feed` call that
    returned the pick, and are corrected for the phase shift of the filters. They may
    be negative when the pick began in an earlier block.

    Attributes
    ----------
    begin_index : float
        Sample position at which the characteristic function began to rise
        (beginning of the pick uncertainty window).
    end_index : float
        Sample position at which the pick was triggered (end of the pick uncertainty
        window).
    polarity : :class:`Polarity`
        First-motion polarity.
    amplitude : float
        Characteristic function value of the triggering band at the trigger sample,
        an indicator of pick strength.
    period : float
        Period of the triggering band (band with the largest characteristic function
        at the trigger sample), in seconds.
    n_samples_up_event_used : int
        Number of samples between the trigger sample and the sample at which the pick
        was confirmed, inclusive.
    band_trigger_values : tuple of float
        Characteristic function of each band at the trigger sample.
    band_max_in_window : tuple of float
        Maximum characteristic function of each band between the trigger sample and
        the confirmation sample.
    trigger_band : int
        Index of the triggering band.
    frequency_low, frequency_high : float
        Lowest lower corner and highest upper corner frequency, in Hz, of the bands
        whose characteristic function exceeded threshold1 between the trigger sample
        and the confirmation sample.
    delta : float
        Sample interval of the data, in seconds.

    """

    begin_index: float
    end_index: float
    polarity: Polarity
    amplitude: float
    period: float
    n_samples_up_event_used: int
    band_trigger_values: tuple
    band_max_in_window: tuple
    trigger_band: int = -1
    frequency_low: float = np.nan
    frequency_high: float = np.nan
    delta: float = 1.0

    @property
    def pick_index(self) -> float:
        """Sample position of the pick, the mid-point of its uncertainty window."""
        return (self.begin_index + self.end_index) / 2.0

    @property
    def uncertainty(self) -> float:
        """Width of the pick uncertainty window, in seconds."""
        return (self.end_index - self.begin_index) * self.delta

    def triggered_bands(self, threshold1) -> np.ndarray:
        """Indices of the bands whose characteristic function reached threshold1."""
        return np.flatnonzero(np.asarray(self.band_max_in_window) >= threshold1)

    def shifted(self, n_samples) -> PickRecord:
        """Return a copy of the pick with its sample positions moved by n_samples."""
        return replace(
            self,
            begin_index=self.begin_index + n_samples,
            end_index=self.end_index + n_samples,
        )

    def times(self, starttime) -> tuple:
        """
        Absolute times of the pick.

        Parameters
        ----------
        starttime : `obspy.UTCDateTime`
            Time of the first sample of the block the pick was returned for.

        Returns
        -------
        begin, pick, end : `obspy.UTCDateTime`
            Times of the beginning of the uncertainty window, the pick and the end of
            the uncertainty window.

        """

        starttime = UTCDateTime(starttime)
        return (
            starttime + self.begin_index * self.delta,
            starttime + self.pick_index * self.delta,
            starttime + self.end_index * self.delta,
        )
