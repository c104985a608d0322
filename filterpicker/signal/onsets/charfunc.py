# -*- coding: utf-8 -*-
"""
The characteristic function (CF) of the picker: the energy of each filtered band,
normalised by its long-term noise statistics, clipped, and reduced to a maximum over
all bands.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

import filterpicker.util as util


# The CF is offset so that a quiescent band sits near zero rather than one
CF_OFFSET = -1.0
# Value reported for bands, and for the cross-band maximum, when no band contributes
CF_UNSET = -1.0


@dataclass
class CharacteristicFunction:
    """
    Characteristic function of a single sample.

    Attributes
    ----------
    values : `numpy.ndarray`
        Unclipped CF of each band (`CF_UNSET` for skipped bands).
    clipped : `numpy.ndarray`
        CF of each band, limited to `max_value`.
    xrec : `numpy.ndarray`
        Band energy, back-corrected to the clip level where the CF was clipped.
    maximum : float
        Largest unclipped CF over all contributing bands.
    clipped_maximum : float
        Clipped CF of the band that produced `maximum`.
    band_max : int
        Index of the band that produced `maximum` (the later band on ties).
    longest_band_triggered : int
        Longest-period band whose unclipped CF is >= threshold1, or -1.
    skipped : `numpy.ndarray` of bool
        Bands excluded because their standard deviation is effectively zero.

    """

    values: np.ndarray
    clipped: np.ndarray
    xrec: np.ndarray
    maximum: float
    clipped_maximum: float
    band_max: int
    longest_band_triggered: int
    skipped: np.ndarray


class CharacteristicFunctionEngine:
    """
    Converts filtered band values into a normalised, per-band characteristic function
    and reduces it across bands.

    Parameters
    ----------
    threshold_scale_factors : array-like
        Threshold scale factor of each band (largest is 1).
    threshold1 : float
        Trigger threshold. The CF is clipped at 5 * threshold1.
    logger : `logging.Logger`, optional
        Logger used to report bands with a vanishing standard deviation.

    Attributes
    ----------
    max_value : float
        Clip level of the CF, 5 * threshold1.

    """

    def __init__(self, threshold_scale_factors, threshold1, logger=None):
        self.scale = np.asarray(threshold_scale_factors, dtype=float)
        self.threshold1 = threshold1
        self.max_value = 5.0 * threshold1
        self.logger = logger or logging.getLogger("filterpicker")
        self._warned = np.zeros(len(self.scale), dtype=bool)

    def evaluate(self, filtered, statistics):
        """
        Compute the characteristic function of the current sample.

        Parameters
        ----------
        filtered : `numpy.ndarray`
            Filtered value of the current sample in each band.
        statistics : :class:`~filterpicker.signal.onsets.statistics.AdaptiveStatistics`
            Long-term statistics of each band, as of the previous sample.

        Returns
        -------
        cf : :class:`CharacteristicFunction`

        """

        xrec = filtered * filtered
        std = statistics.std_xrec
        mean = statistics.mean_xrec

        skipped = std <= util.FLOAT_MIN_NORMAL
        if skipped.any():
            self._warn_skipped(skipped)
            safe_std = np.where(skipped, 1.0, std)
        else:
            safe_std = std

        values = self.scale * (xrec - mean) / safe_std + CF_OFFSET
        values[skipped] = CF_UNSET

        clip = values > self.max_value
        clipped = np.where(clip, self.max_value, values)
        if clip.any():
            xrec = np.where(clip, self.max_value * std / self.scale + mean, xrec)

        contributing = ~skipped
        if contributing.any():
            masked = np.where(contributing, values, -np.inf)
            band_max = len(masked) - 1 - int(np.argmax(masked[::-1]))
            maximum = float(values[band_max])
            clipped_maximum = float(clipped[band_max])
        else:
            band_max = 0
            maximum = clipped_maximum = CF_UNSET

        triggered = np.flatnonzero(contributing & (values >= self.threshold1))
        longest = int(triggered[-1]) if triggered.size else -1

        return CharacteristicFunction(
            values=values,
            clipped=clipped,
            xrec=xrec,
            maximum=maximum,
            clipped_maximum=clipped_maximum,
            band_max=band_max,
            longest_band_triggered=longest,
            skipped=skipped,
        )

    def _warn_skipped(self, skipped):
        """Log, once per band, that a band was excluded for a vanishing std."""
        new = skipped & ~self._warned
        for band in np.flatnonzero(new):
            self.logger.warning(
                f"Standard deviation of band {band} energy is effectively zero - "
                "band excluded from the characteristic function until it recovers."
            )
        self._warned |= new
