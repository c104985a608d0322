# -*- coding: utf-8 -*-
"""
Recursive Butterworth bandpass filter bank, advanced one sample at a time.

Each band is a cascade of 4-pole bandpass sections (num_poles_bandpass / 4 of them).
The state of every band and section is held in `(n_bands, n_sections)` arrays, so a
single call to :meth:`BandFilterBank.advance` filters the current sample through all
bands at once.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

import numpy as np

from .bands import band_corners


# Fraction of a period of phase shift introduced by each pair of poles
FRACTION_PERIOD_PHASE_SHIFT_PER_2_POLES = 8.0


def bandpass_coefficients(periods, bandwidth_factor, delta, num_poles):
    """
    Compute the recursion coefficients of a cascade of 4-pole Butterworth bandpass
    sections for each band.

    Parameters
    ----------
    periods : array-like
        Band centre periods, in seconds.
    bandwidth_factor : float
        Ratio of consecutive band periods; sets the width of each passband.
    delta : float
        Sample interval of the data, in seconds.
    num_poles : int
        Filter order, a multiple of 4.

    Returns
    -------
    A, d1, d2, d3, d4 : `numpy.ndarray`
        Coefficients, each of shape `(n_bands, num_poles // 4)`.

    """

    f2, f1 = band_corners(periods, bandwidth_factor, delta)
    fs = 1.0 / delta

    a = np.cos(np.pi * (f1 + f2) / fs) / np.cos(np.pi * (f1 - f2) / fs)
    b = np.tan(np.pi * (f1 - f2) / fs)
    a, b = a[:, np.newaxis], b[:, np.newaxis]
    a2, b2 = a * a, b * b

    n = num_poles // 4
    r = np.sin(np.pi * (2.0 * np.arange(n) + 1.0) / (4.0 * n))[np.newaxis, :]
    s = b2 + 2.0 * b * r + 1.0

    A = b2 / s
    d1 = 4.0 * a * (1.0 + b * r) / s
    d2 = 2.0 * (b2 - 2.0 * a2 - 1.0) / s
    d3 = 4.0 * a * (1.0 - b * r) / s
    d4 = -(b2 - 2.0 * b * r + 1.0) / s

    return A, d1, d2, d3, d4


class BandFilterBank:
    """
    Bank of cascaded recursive bandpass filters, one per band.

    Parameters
    ----------
    periods : array-like
        Band centre periods, in seconds, in order of increasing period.
    bandwidth_factor : float
        Ratio of consecutive band periods.
    delta : float
        Sample interval of the data, in seconds.
    num_poles : int, optional
        Filter order, a multiple of 4. Default: 4.

    Attributes
    ----------
    periods : `numpy.ndarray`
        Band centre periods, in seconds.
    A, d1, d2, d3, d4 : `numpy.ndarray`
        Recursion coefficients, of shape `(n_bands, n_sections)`.
    w : `numpy.ndarray`
        Delay lines w0..w4, of shape `(5, n_bands, n_sections)`.
    filtered : `numpy.ndarray`
        Output of each band for the current sample.
    last_filtered : `numpy.ndarray`
        Output of each band for the previous sample.

    """

    def __init__(self, periods, bandwidth_factor, delta, num_poles=4):
        self.periods = np.asarray(periods, dtype=float)
        self.bandwidth_factor = bandwidth_factor
        self.delta = delta
        self.num_poles = num_poles

        self.A, self.d1, self.d2, self.d3, self.d4 = bandpass_coefficients(
            self.periods, bandwidth_factor, delta, num_poles
        )
        n_bands, n_sections = self.A.shape
        self.w = np.zeros((5, n_bands, n_sections))
        self.filtered = np.zeros(n_bands)
        self.last_filtered = np.zeros(n_bands)

    def __len__(self):
        return len(self.periods)

    def __str__(self):
        f_low, f_high = self.corners()
        out = f"\tBandFilterBank - {len(self)} bands, {self.num_poles} poles\n"
        for period, fl, fh in zip(self.periods, f_low, f_high):
            out += f"\t\tT = {period:9.4f} s\tfl = {fl:9.4f} Hz\tfh = {fh:9.4f} Hz\n"
        return out

    def advance(self, sample):
        """
        Filter one raw sample through every band.

        Parameters
        ----------
        sample : float
            Current raw sample.

        Returns
        -------
        filtered : `numpy.ndarray`
            Filtered value of the current sample for each band.

        """

        w = self.w
        x = np.full(len(self.periods), float(sample))
        for i in range(self.A.shape[1]):
            w[0, :, i] = (
                self.d1[:, i] * w[1, :, i]
                + self.d2[:, i] * w[2, :, i]
                + self.d3[:, i] * w[3, :, i]
                + self.d4[:, i] * w[4, :, i]
                + x
            )
            x = self.A[:, i] * (w[0, :, i] - 2.0 * w[2, :, i] + w[4, :, i])
            w[4, :, i] = w[3, :, i]
            w[3, :, i] = w[2, :, i]
            w[2, :, i] = w[1, :, i]
            w[1, :, i] = w[0, :, i]

        self.last_filtered = self.filtered
        self.filtered = x

        return x

    def corners(self):
        """Passband corner frequencies `(f_low, f_high)` of each band, in Hz."""
        return band_corners(self.periods, self.bandwidth_factor, self.delta)

    def phase_shift(self, period):
        """
        Approximate filter delay, in samples, for a band of the given period.

        Parameters
        ----------
        period : float
            Band centre period, in seconds.

        Returns
        -------
        shift : int
            Number of samples by which the filtered signal lags the raw signal.

        """

        return int(
            (self.num_poles // 2)
            * (period / FRACTION_PERIOD_PHASE_SHIFT_PER_2_POLES / self.delta)
        )
