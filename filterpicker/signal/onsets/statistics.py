# -*- coding: utf-8 -*-
"""
Long-term, exponentially decaying noise statistics of each filter band.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

import numpy as np


# Lower bound of the adaptive uncertainty threshold. The characteristic function is
# offset by -1, so a quiescent band sits just below zero.
MIN_UNCERTAINTY_THRESHOLD = -0.5


class AdaptiveStatistics:
    """
    Per-band decaying mean and variance of the band energy, and the adaptive threshold
    used to find where the characteristic function began to rise.

    The decay horizon is an absolute time (`long_term_window`), identical for all
    bands.

    Parameters
    ----------
    n_bands : int
        Number of filter bands.
    delta : float
        Sample interval of the data, in seconds.
    long_term_window : float
        Decay horizon of the statistics, in seconds.
    threshold1 : float
        Trigger threshold; sets the initial standard deviation (5 * threshold1) and
        the upper bound of the uncertainty threshold (threshold1 / 2).

    Attributes
    ----------
    factor : float
        Weight of the current sample, `delta / long_term_window`.
    const : float
        Decay of the previous value, `1 - factor`.
    mean_xrec : `numpy.ndarray`
        Decaying mean of the band energy.
    var_xrec : `numpy.ndarray`
        Decaying variance of the band energy.
    std_xrec : `numpy.ndarray`
        Square root of `var_xrec`.
    uncertainty_threshold : `numpy.ndarray`
        Adaptive threshold on the uncertainty characteristic function.
    n_enable_triggering : int
        Number of samples in one long-term window. Triggering is disabled until the
        statistics have seen this many samples.

    """

    def __init__(self, n_bands, delta, long_term_window, threshold1):
        self.factor = delta / long_term_window
        self.const = 1.0 - self.factor
        self.n_enable_triggering = 1 + int(long_term_window / delta)

        self.max_uncertainty_threshold = threshold1 / 2.0
        self.min_uncertainty_threshold = MIN_UNCERTAINTY_THRESHOLD

        self.mean_xrec = np.zeros(n_bands)
        self.var_xrec = np.zeros(n_bands)
        self.std_xrec = np.full(n_bands, 5.0 * threshold1)
        self.uncertainty_threshold = np.full(n_bands, threshold1 / 2.0)

    def update(self, xrec, cf_uncertainty):
        """
        Fold the current sample into the statistics.

        Parameters
        ----------
        xrec : `numpy.ndarray`
            Energy of the current sample in each band, after any clipping correction.
        cf_uncertainty : `numpy.ndarray` or float
            Current uncertainty characteristic function of each band.

        """

        self.mean_xrec = self.mean_xrec * self.const + xrec * self.factor
        dev = xrec - self.mean_xrec
        self.var_xrec = self.var_xrec * self.const + dev * dev * self.factor
        self.std_xrec = np.sqrt(self.var_xrec)

        self.uncertainty_threshold = np.clip(
            self.uncertainty_threshold * self.const + cf_uncertainty * self.factor,
            self.min_uncertainty_threshold,
            self.max_uncertainty_threshold,
        )
