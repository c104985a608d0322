# -*- coding: utf-8 -*-
"""
Definition, derivation and validation of the filter bands used by the picker.

Bands are described by their centre period and a threshold scale factor, and are
either listed explicitly (as :class:`BandParameters` objects, (period, scale) pairs or
a band parameter string) or derived automatically from a filter window: starting from
`bandwidth_factor` times the Nyquist period, each band is `bandwidth_factor` times
longer than the last until the filter window is reached.

Band parameter strings take two forms:

    * "0.05#0.1/0.9#0.2s/0.8#4Hz" - bands separated by "#", each an optional unit
      ("s" for a period, the default, or "Hz" for a frequency) followed by an optional
      "/scale" threshold scale factor.
    * "0.5,1.:1.,1.:2.,0.5" - "frequency,scale" pairs separated by ":" or "-". Bands
      are sorted by increasing period.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace

import numpy as np

import filterpicker.util as util


BANDWIDTH_FACTOR_DEFAULT = 1.25
BANDWIDTH_FACTOR_MIN = 1.1
BANDWIDTH_FACTOR_MAX = 100.0
# Percentage deviation of a single period ratio from the mean bandwidth factor
BANDWIDTH_VARIATION_ERROR = 10.0
BANDWIDTH_VARIATION_WARNING = 2.0

PERIOD = "period"
FREQUENCY = "frequency"


@dataclass(frozen=True)
class BandParameters:
    """
    Parameters of a single filter band.

    Attributes
    ----------
    period : float
        Centre period of the band, in seconds.
    threshold_scale_factor : float
        Factor by which the characteristic function of this band is scaled relative to
        the trigger thresholds. Normalised so that the largest across all bands is 1.
    display_mode : {"period", "frequency"}
        Whether the band is displayed as a period ("s") or a frequency ("Hz").

    """

    period: float
    threshold_scale_factor: float = 1.0
    display_mode: str = PERIOD

    @property
    def frequency(self) -> float:
        """Centre frequency of the band, in Hz."""
        return 1.0 / self.period

    def check(self) -> list:
        """Return the validation errors for this band, if any."""
        errors = []
        if not self.period > 0.0:
            errors.append(util.InvalidParameterException("period", self.period, "> 0"))
        if not self.threshold_scale_factor > 0.0:
            errors.append(
                util.InvalidParameterException(
                    "threshold_scale_factor", self.threshold_scale_factor, "> 0"
                )
            )
        if self.display_mode not in (PERIOD, FREQUENCY):
            errors.append(
                util.InvalidParameterException(
                    "display_mode", self.display_mode, "'period' or 'frequency'"
                )
            )
        return errors

    def __str__(self) -> str:
        return format_band_parameters([self])


def as_band_parameters(bands) -> tuple[BandParameters, ...]:
    """
    Coerce a band description into a tuple of :class:`BandParameters`.

    Parameters
    ----------
    bands : str or sequence
        A band parameter string, or a sequence whose items are
        :class:`BandParameters`, `(period, scale)` pairs or bare periods.

    Returns
    -------
    bands : tuple of :class:`BandParameters`

    Raises
    ------
    BandParameterStringException
        If a string or item cannot be interpreted as a band.

    """

    if isinstance(bands, str):
        return parse_band_parameters(bands)

    out = []
    for item in bands:
        if isinstance(item, BandParameters):
            out.append(item)
        elif np.ndim(item) == 0:
            out.append(BandParameters(float(item)))
        elif len(item) == 2:
            out.append(BandParameters(float(item[0]), float(item[1])))
        elif len(item) == 3:
            out.append(BandParameters(float(item[0]), float(item[1]), item[2]))
        else:
            raise util.BandParameterStringException(
                str(item), "expected (period, threshold_scale_factor)"
            )

    return tuple(out)


def parse_band_parameters(text: str) -> tuple[BandParameters, ...]:
    """
    Parse a band parameter string (see module docstring for the accepted forms).

    Parameters
    ----------
    text : str
        Band parameter string.

    Returns
    -------
    bands : tuple of :class:`BandParameters`
        Parsed bands, empty if `text` holds no bands.

    Raises
    ------
    BandParameterStringException
        If a token cannot be parsed.

    """

    text = text.strip()
    if "," in text:
        return _parse_frequency_pairs(text)

    bands = []
    for token in filter(None, (t.strip() for t in text.split("#"))):
        band, _, scale = token.partition("/")
        band = band.strip()
        try:
            if band.lower().endswith("hz"):
                period = 1.0 / float(band[:-2])
                mode = FREQUENCY
            elif band.lower().endswith("s"):
                period = float(band[:-1])
                mode = PERIOD
            else:
                period = float(band)
                mode = PERIOD
            scale = float(scale) if scale.strip() else 1.0
        except (ValueError, ZeroDivisionError) as e:
            raise util.BandParameterStringException(text, f"'{token}' - {e}")
        bands.append(BandParameters(period, scale, mode))

    return tuple(bands)


def _parse_frequency_pairs(text: str) -> tuple[BandParameters, ...]:
    """Parse the "frequency,scale:frequency,scale" band string form."""

    bands = []
    for token in filter(None, (t.strip() for t in re.split("[:-]", text))):
        parts = token.split(",")
        if len(parts) != 2:
            raise util.BandParameterStringException(
                text, f"'{token}' is not a 'frequency,scale' pair"
            )
        try:
            freq, scale = float(parts[0]), float(parts[1])
            bands.append(BandParameters(1.0 / freq, scale, FREQUENCY))
        except (ValueError, ZeroDivisionError) as e:
            raise util.BandParameterStringException(text, f"'{token}' - {e}")

    return tuple(sorted(bands, key=lambda band: band.period))


def format_band_parameters(bands, display_mode: str | None = None) -> str:
    """
    Format bands as a "#"-separated band parameter string.

    Parameters
    ----------
    bands : sequence of :class:`BandParameters`
        Bands to format.
    display_mode : {"period", "frequency"}, optional
        Force every band to be shown as a period or frequency. By default each band
        uses its own display mode.

    Returns
    -------
    text : str
        E.g. "0.05s/1#0.1s/0.9#4Hz/0.8".

    """

    tokens = []
    for band in bands:
        mode = display_mode or band.display_mode
        if mode == FREQUENCY:
            value = f"{np.float32(band.frequency)}Hz"
        else:
            value = f"{np.float32(band.period)}s"
        tokens.append(f"{value}/{np.float32(band.threshold_scale_factor)}")

    return "#".join(tokens)


def auto_bands(filter_window, delta, bandwidth_factor=BANDWIDTH_FACTOR_DEFAULT):
    """
    Derive bands automatically from a filter window. Bands start at `bandwidth_factor`
    times the Nyquist period and are spaced by `bandwidth_factor` up to the first
    period at or beyond `filter_window`; every scale factor is 1.

    Parameters
    ----------
    filter_window : float
        Approximate longest band period, in seconds.
    delta : float
        Sample interval of the data, in seconds.
    bandwidth_factor : float, optional
        Ratio of consecutive band periods.

    Returns
    -------
    bands : tuple of :class:`BandParameters`

    """

    period0 = bandwidth_factor * delta * 2.0

    n_bands = 1
    period = period0
    while period < filter_window:
        n_bands += 1
        period *= bandwidth_factor

    bands = []
    period = period0
    for _ in range(n_bands):
        bands.append(BandParameters(period))
        period *= bandwidth_factor

    return tuple(bands)


def check_band_order(bands) -> list:
    """Return a `BandOrderException` in a list if periods are not increasing."""
    periods = [band.period for band in bands]
    if any(p1 <= p0 for p0, p1 in zip(periods, periods[1:])):
        return [util.BandOrderException(periods)]
    return []


def bandwidth_factor_from_bands(bands, log=None) -> float:
    """
    Measure the bandwidth factor as the mean ratio of consecutive band periods, and
    check that each individual ratio is close to it.

    Parameters
    ----------
    bands : sequence of :class:`BandParameters`
        Bands, in order of increasing period.
    log : `logging.Logger`, optional
        Logger used to report band ratios that vary by more than 2%.

    Returns
    -------
    bandwidth_factor : float
        Mean ratio of consecutive band periods. The default bandwidth factor is
        returned for fewer than two bands.

    Raises
    ------
    BandWidthFactorException
        If a ratio varies from the mean by more than 10%, or the mean is outside
        [1.1, 100].

    """

    log = log or logging.getLogger("filterpicker")

    if len(bands) < 2:
        return BANDWIDTH_FACTOR_DEFAULT

    periods = np.array([band.period for band in bands])
    ratios = periods[1:] / periods[:-1]
    mean_ratio = float(ratios.mean())
    variation = np.abs(1.0 - ratios / mean_ratio) * 100.0

    if variation.max() > BANDWIDTH_VARIATION_WARNING:
        log.warning(
            "Bandwidth factor between band periods varies from mean bandwidth factor="
            f"{mean_ratio:g} by > {BANDWIDTH_VARIATION_WARNING}%"
        )
        for n, (ratio, var) in enumerate(zip(ratios, variation), start=1):
            log.warning(
                f"      n={n - 1}->{n}: per={periods[n - 1]:g}->{periods[n]:g}s, "
                f"bandwidth factor={ratio:g}, var={var:.0f}%"
            )
    if variation.max() > BANDWIDTH_VARIATION_ERROR:
        raise util.BandWidthFactorException(mean_ratio, float(variation.max()))
    if not BANDWIDTH_FACTOR_MIN <= mean_ratio <= BANDWIDTH_FACTOR_MAX:
        raise util.BandWidthFactorException(mean_ratio)

    return mean_ratio


def normalise_scale_factors(bands) -> tuple[BandParameters, ...]:
    """Rescale the threshold scale factors so that the largest is 1."""
    scale_max = max(band.threshold_scale_factor for band in bands)
    if scale_max <= util.FLOAT_MIN_NORMAL:
        return tuple(bands)
    return tuple(
        replace(band, threshold_scale_factor=band.threshold_scale_factor / scale_max)
        for band in bands
    )


def check_nyquist(bands, delta) -> None:
    """
    Check that every band period is at least the Nyquist period of the data.

    Raises
    ------
    NyquistException
        For the first band whose period is shorter than `2 * delta`.

    """

    for band in bands:
        if band.period < 2.0 * delta:
            raise util.NyquistException(band.period, delta)


def band_corners(period, bandwidth_factor, delta):
    """
    Passband corner frequencies of a band.

    Parameters
    ----------
    period : float or array-like
        Band centre period(s), in seconds.
    bandwidth_factor : float
        Ratio of consecutive band periods.
    delta : float
        Sample interval of the data, in seconds.

    Returns
    -------
    f_low, f_high : float or `numpy.ndarray`
        Lower and upper corner frequencies, in Hz. The upper corner is limited to the
        Nyquist frequency.

    """

    freq = 1.0 / np.asarray(period, dtype=float)
    multiplier = bandwidth_factor**1.5
    f_high = np.minimum(freq * multiplier, 0.5 / delta)
    f_low = freq / multiplier

    return f_low, f_high
