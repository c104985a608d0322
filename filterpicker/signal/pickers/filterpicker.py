# -*- coding: utf-8 -*-
"""
The FilterPicker6 real-time phase picker.

Samples are passed through a bank of bandpass filters. The energy in each band is
normalised by its long-term decaying statistics into a characteristic function (CF),
which is reduced to a maximum over all bands. A pick is declared when the integral of
the clipped CF over `t_up_event` seconds exceeds `threshold2 * t_up_event`, and is
confirmed back in time to the first sample at which the CF exceeded threshold1. The
pick is reported with an uncertainty window (from the point where the CF began to rise
to the trigger sample), its first-motion polarity, amplitude and dominant period.

The picker is a streaming state machine: contiguous blocks of samples are passed to
:meth:`FilterPicker.feed` one after the other, and all state persists between calls.
After a gap in the data, :meth:`FilterPicker.reset_memory` must be called.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields

import numpy as np
import pandas as pd

import filterpicker.util as util
from filterpicker.signal import bands as fpbands
from filterpicker.signal.filters import BandFilterBank
from filterpicker.signal.onsets import AdaptiveStatistics, CharacteristicFunctionEngine
from .base import PhasePicker
from .trigger import PickStateMachine, TriggerWindowBuffer


FILTER_WINDOW_DEFAULT = 10.0
LONG_TERM_WINDOW_DEFAULT = 30.0
THRESHOLD1_DEFAULT = 10.0
THRESHOLD2_DEFAULT = 8.0
T_UP_EVENT_DEFAULT = 5.0
T_UP_EVENT_MIN_DEFAULT = 1.0
NUM_POLES_BANDPASS_DEFAULT = 4


@dataclass(frozen=True)
class PickerConfig:
    """
    Immutable, validated configuration of a :class:`FilterPicker`. Create it with
    :meth:`PickerConfig.create`, which validates every option.

    Attributes
    ----------
    bands : tuple of :class:`~filterpicker.signal.bands.BandParameters` or None
        Explicit filter bands, in order of increasing period, with threshold scale
        factors normalised to a maximum of 1. If None, bands are derived from
        `filter_window` once the sample interval is known.
    filter_window : float or None
        Approximate longest band period, in seconds, used when `bands` is None.
    long_term_window : float
        Decay horizon of the band statistics, in seconds. Also the stabilisation time
        before triggering is enabled.
    threshold1 : float
        Trigger threshold on the characteristic function.
    threshold2 : float
        Confirmation threshold on the mean characteristic function over `t_up_event`.
    t_up_event : float
        Length of the confirmation window, in seconds.
    t_up_event_min : float
        Length of the short confirmation window, in seconds, over which the mean
        characteristic function must reach threshold1.
    bandwidth_factor : float
        Ratio of consecutive band periods. Measured from `bands` when they are given.
    num_poles_bandpass : int
        Order of each band's bandpass filter, a multiple of 4 in [4, 16].

    """

    bands: tuple | None = None
    filter_window: float | None = FILTER_WINDOW_DEFAULT
    long_term_window: float = LONG_TERM_WINDOW_DEFAULT
    threshold1: float = THRESHOLD1_DEFAULT
    threshold2: float = THRESHOLD2_DEFAULT
    t_up_event: float = T_UP_EVENT_DEFAULT
    t_up_event_min: float = T_UP_EVENT_MIN_DEFAULT
    bandwidth_factor: float = fpbands.BANDWIDTH_FACTOR_DEFAULT
    num_poles_bandpass: int = NUM_POLES_BANDPASS_DEFAULT

    @classmethod
    def create(cls, logger=None, **kwargs) -> PickerConfig:
        """
        Validate the supplied options and build a configuration.

        Parameters
        ----------
        logger : `logging.Logger`, optional
            Logger used to report warnings about the band layout.
        kwargs : dict
            Any of the attributes of :class:`PickerConfig`. `bands` may also be a band
            parameter string or a sequence of `(period, threshold_scale_factor)`
            pairs.

        Returns
        -------
        config : :class:`PickerConfig`

        Raises
        ------
        ConfigError
            If any option is invalid. When several are, a `ConfigErrors` listing all
            of them is raised.
        TypeError
            If an unknown option is supplied.

        """

        known = {field.name for field in fields(cls)}
        unknown = set(kwargs) - known
        if unknown:
            raise TypeError(f"Unknown picker options: {', '.join(sorted(unknown))}")

        options = {field.name: field.default for field in fields(cls)}
        options.update(kwargs)
        errors = []

        for name in ["long_term_window", "threshold1", "threshold2", "t_up_event",
                     "t_up_event_min"]:
            value = options[name]
            if not _is_positive(value):
                errors.append(util.InvalidParameterException(name, value, "> 0"))
            else:
                options[name] = float(value)

        if not errors:
            if options["threshold1"] < options["threshold2"]:
                errors.append(
                    util.ThresholdOrderException(
                        options["threshold1"], options["threshold2"]
                    )
                )
            if options["t_up_event_min"] >= options["t_up_event"]:
                errors.append(
                    util.UpEventWindowException(
                        options["t_up_event_min"], options["t_up_event"]
                    )
                )

        num_poles = options["num_poles_bandpass"]
        if (
            isinstance(num_poles, bool)
            or not isinstance(num_poles, (int, float, np.integer))
            or not np.isfinite(num_poles)
            or int(num_poles) != num_poles
            or num_poles % 4 != 0
            or not 4 <= num_poles <= 16
        ):
            errors.append(util.NumPolesException(num_poles))
        else:
            options["num_poles_bandpass"] = int(num_poles)

        bands = options["bands"]
        if bands is not None:
            try:
                bands = fpbands.as_band_parameters(bands)
            except util.ConfigError as e:
                errors.append(e)
                bands = ()
        if bands:
            band_errors = [e for band in bands for e in band.check()]
            band_errors.extend(fpbands.check_band_order(bands))
            if not band_errors:
                try:
                    options["bandwidth_factor"] = fpbands.bandwidth_factor_from_bands(
                        bands, log=logger
                    )
                except util.ConfigError as e:
                    band_errors.append(e)
            errors.extend(band_errors)
            if not band_errors:
                bands = fpbands.normalise_scale_factors(bands)
            options["bands"] = tuple(bands)
            options["filter_window"] = None
        else:
            options["bands"] = None
            filter_window = options["filter_window"]
            if filter_window is None:
                errors.append(util.NoBandsException())
            elif not _is_positive(filter_window):
                errors.append(
                    util.InvalidParameterException(
                        "filter_window", filter_window, "> 0"
                    )
                )
            else:
                options["filter_window"] = float(filter_window)
            bwf = options["bandwidth_factor"]
            if not (
                _is_positive(bwf)
                and fpbands.BANDWIDTH_FACTOR_MIN <= bwf <= fpbands.BANDWIDTH_FACTOR_MAX
            ):
                errors.append(util.BandWidthFactorException(bwf))

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise util.ConfigErrors(errors)

        return cls(**options)

    def resolve_bands(self, delta) -> tuple:
        """Return the explicit bands, or derive them from the filter window."""
        if self.bands is not None:
            return self.bands
        return fpbands.auto_bands(self.filter_window, delta, self.bandwidth_factor)

    def __str__(self):
        """Return short summary string of the PickerConfig object."""

        if self.bands is not None:
            bands = fpbands.format_band_parameters(self.bands)
        else:
            bands = f"derived from filter window = {self.filter_window} s"
        out = (
            "\tFilterPicker parameters:\n"
            f"\t\tBands = {bands}\n"
            f"\t\tBandwidth factor = {self.bandwidth_factor:g}\n"
            f"\t\tBandpass poles = {self.num_poles_bandpass}\n"
            f"\t\tLong-term window = {self.long_term_window} s\n"
            f"\t\tThreshold1 = {self.threshold1}\n"
            f"\t\tThreshold2 = {self.threshold2}\n"
            f"\t\tT_up_event = {self.t_up_event} s\n"
            f"\t\tT_up_event_min = {self.t_up_event_min} s\n"
        )

        return out


def _is_positive(value):
    """True if value is a finite number greater than zero."""
    try:
        return bool(np.isfinite(value) and value > 0)
    except TypeError:
        return False


@dataclass
class PickerState:
    """
    All mutable state of a picker for one continuous stream, built in a single pass
    by :func:`initialise_state` once the sample interval is known.

    Attributes
    ----------
    delta : float
        Sample interval, in seconds.
    bands : tuple of :class:`~filterpicker.signal.bands.BandParameters`
        Bands in use.
    filter_bank : :class:`~filterpicker.signal.filters.BandFilterBank`
    statistics : :class:`~filterpicker.signal.onsets.statistics.AdaptiveStatistics`
    engine : :class:`~filterpicker.signal.onsets.charfunc.CharacteristicFunctionEngine`
    buffer : :class:`~filterpicker.signal.pickers.trigger.TriggerWindowBuffer`
    gate : :class:`~filterpicker.signal.pickers.trigger.PickStateMachine`
    n_total : int
        Samples seen while triggering was disabled, minus one.
    enabled : bool
        Whether the statistics have stabilised and triggering is enabled.

    """

    delta: float
    bands: tuple
    filter_bank: BandFilterBank
    statistics: AdaptiveStatistics
    engine: CharacteristicFunctionEngine
    buffer: TriggerWindowBuffer
    gate: PickStateMachine
    n_total: int = -1
    enabled: bool = False


def initialise_state(config, delta, logger=None) -> PickerState:
    """
    Build the complete picker state for a stream with sample interval `delta`.

    Parameters
    ----------
    config : :class:`PickerConfig`
        Validated picker configuration.
    delta : float
        Sample interval, in seconds.
    logger : `logging.Logger`, optional
        Logger handed to the components.

    Returns
    -------
    state : :class:`PickerState`

    Raises
    ------
    NyquistException
        If a band period is shorter than the Nyquist period `2 * delta`.

    """

    logger = logger or logging.getLogger("filterpicker")

    bands = config.resolve_bands(delta)
    fpbands.check_nyquist(bands, delta)
    periods = np.array([band.period for band in bands])
    scales = np.array([band.threshold_scale_factor for band in bands])

    n_t_up_event = util.time2sample(config.t_up_event, delta) + 1
    n_t_up_event_min = util.time2sample(config.t_up_event_min, delta) + 1
    n_sample_memory = n_t_up_event + 1 + int(periods[-1] / delta)

    filter_bank = BandFilterBank(
        periods, config.bandwidth_factor, delta, config.num_poles_bandpass
    )
    statistics = AdaptiveStatistics(
        len(bands), delta, config.long_term_window, config.threshold1
    )
    engine = CharacteristicFunctionEngine(scales, config.threshold1, logger=logger)
    buffer = TriggerWindowBuffer(
        len(bands), n_sample_memory, n_t_up_event, n_t_up_event_min
    )
    gate = PickStateMachine(
        buffer, filter_bank, config.threshold1, config.threshold2, logger=logger
    )

    logger.info(f"\tFilterPicker initialised for sample interval {delta} s")
    logger.info(f"\t\tBands = {fpbands.format_band_parameters(bands)}")
    logger.debug(str(filter_bank))
    logger.debug(
        f"\t\tn_t_up_event = {n_t_up_event}, n_t_up_event_min = {n_t_up_event_min}, "
        f"n_sample_memory = {n_sample_memory}, "
        f"n_enable_triggering = {statistics.n_enable_triggering}"
    )

    return PickerState(
        delta=delta,
        bands=bands,
        filter_bank=filter_bank,
        statistics=statistics,
        engine=engine,
        buffer=buffer,
        gate=gate,
    )


class FilterPicker(PhasePicker):
    """
    Real-time multi-band phase picker for a single channel.

    Parameters
    ----------
    config : :class:`PickerConfig`, optional
        Validated configuration. Default: the default configuration.
    logger : `logging.Logger`, optional
        Logger used for diagnostics. Default: the "filterpicker" logger.

    Attributes
    ----------
    config : :class:`PickerConfig`
        Picker configuration.
    delta : float or None
        Sample interval established by the first call to :meth:`feed`.
    state : :class:`PickerState` or None
        State of the current stream; None until samples are fed and after
        :meth:`reset_memory`.

    Methods
    -------
    feed(delta, samples)
        Process a contiguous block of samples, returning the picks accepted in it.
    onset(delta, samples)
        Process a contiguous block of samples, returning the clipped characteristic
        function.
    reset_memory()
        Discard all stream state, e.g. after a data gap.
    pick_trace(trace)
        Pick an ObsPy Trace.
    pick_phases(stream)
        Pick every trace of an ObsPy Stream, returning a DataFrame of picks.

    """

    def __init__(self, config=None, logger=None, **kwargs):
        """Instantiate the FilterPicker object."""

        super().__init__(**kwargs)

        self.config = config or PickerConfig.create(logger=logger)
        self.logger = logger or logging.getLogger("filterpicker")
        self.delta = None
        self.state = None

    @classmethod
    def from_kwargs(cls, logger=None, **kwargs) -> FilterPicker:
        """Validate the options in `kwargs` and build a picker from them."""
        return cls(PickerConfig.create(logger=logger, **kwargs), logger=logger)

    def __str__(self):
        """Return short summary string of the FilterPicker object."""
        return str(self.config)

    def feed(self, delta, samples) -> list:
        """
        Process a contiguous block of samples.

        Parameters
        ----------
        delta : float
            Sample interval, in seconds. Must be the same for every call.
        samples : array-like
            Samples of the block, contiguous with the previous block.

        Returns
        -------
        picks : list of :class:`~filterpicker.signal.pickers.pickdata.PickRecord`
            Picks accepted in this block, in order. Sample positions are relative to
            the first sample of `samples`.

        Raises
        ------
        SampleIntervalChangedException
            If `delta` differs from the sample interval of the first call.
        NyquistException
            If a band period is shorter than the Nyquist period.

        """

        return self._process(delta, samples)

    def onset(self, delta, samples) -> np.ndarray:
        """
        Process a contiguous block of samples, as :meth:`feed`, returning the clipped
        cross-band characteristic function of every sample instead of the picks. It
        is zero until triggering is enabled.

        """

        onset = np.zeros(len(samples))
        self._process(delta, samples, onset=onset)
        return onset

    def reset_memory(self) -> None:
        """Discard all stream state. The next block starts a new stream."""
        self.state = None

    def _process(self, delta, samples, onset=None) -> list:
        """Run the per-sample loop over a block of samples."""

        self._check_delta(delta)
        samples = np.asarray(samples, dtype=float)
        if self.state is None:
            # Sample interval is only fixed once the state has been built
            self.state = initialise_state(self.config, delta, self.logger)
            self.delta = delta

        state = self.state
        picks = []
        for index, sample in enumerate(samples):
            pick = self._step(state, index, sample)
            if pick is not None:
                picks.append(pick)
            if onset is not None:
                onset[index] = state.buffer.cf_clipped.at(0)

        state.buffer.rebase(len(samples))
        state.gate.rebase(len(samples))

        return picks

    def _check_delta(self, delta):
        if self.delta is not None and abs(self.delta - delta) > util.FLOAT_MIN_NORMAL:
            raise util.SampleIntervalChangedException(self.delta, delta)

    @staticmethod
    def _step(state, index, sample):
        """Advance the picker state by one sample."""

        filtered = state.filter_bank.advance(sample)
        cf = state.engine.evaluate(filtered, state.statistics)

        if not state.enabled:
            state.enabled = state.n_total > state.statistics.n_enable_triggering
            state.n_total += 1

        derivative = filtered - state.filter_bank.last_filtered
        cf_uncertainty = state.buffer.push(
            index,
            cf,
            state.statistics.uncertainty_threshold,
            derivative,
            state.enabled,
        )

        pick = None
        if state.enabled:
            pick = state.gate.step(index, cf_uncertainty)

        state.statistics.update(cf.xrec, cf_uncertainty)

        return pick

    def pick_trace(self, trace) -> list:
        """
        Feed the data of an ObsPy Trace to the picker.

        Parameters
        ----------
        trace : `obspy.Trace` object
            Waveform data, contiguous with any previously fed data.

        Returns
        -------
        picks : list of :class:`~filterpicker.signal.pickers.pickdata.PickRecord`
            Picks, with sample positions relative to the first sample of the trace.

        """

        return self.feed(trace.stats.delta, trace.data)

    @util.timeit("info")
    def pick_phases(self, stream, gap_tolerance=1.5) -> pd.DataFrame:
        """
        Pick every trace in a Stream, with one independent picker per trace ID.
        Consecutive traces of the same ID are treated as a continuous stream unless
        separated by a gap or overlap, in which case the picker memory is reset.

        Parameters
        ----------
        stream : `obspy.Stream` object
            Waveform data.
        gap_tolerance : float, optional
            Largest misalignment between consecutive traces, in samples, treated as
            continuous data.

        Returns
        -------
        picks : `pandas.DataFrame` object
            Picks of every trace, see
            :func:`~filterpicker.io.picks.picks_to_dataframe`.

        """

        from filterpicker.io.picks import PICK_COLUMNS, picks_to_dataframe

        frames = []
        for trace_id in sorted({tr.id for tr in stream}):
            traces = sorted(
                stream.select(id=trace_id), key=lambda tr: tr.stats.starttime
            )
            picker = FilterPicker(self.config, logger=self.logger)
            expected = None
            for tr in traces:
                if expected is not None and (
                    abs(tr.stats.starttime - expected) > gap_tolerance * tr.stats.delta
                ):
                    self.logger.info(
                        f"\t\tGap or overlap in {trace_id} at {tr.stats.starttime} "
                        "- resetting picker memory."
                    )
                    picker.reset_memory()
                picks = picker.pick_trace(tr)
                expected = tr.stats.endtime + tr.stats.delta
                self.logger.info(f"\t\t{trace_id}: {len(picks)} picks")
                if picks:
                    frames.append(
                        picks_to_dataframe(picks, tr.stats.starttime, trace_id)
                    )

        if not frames:
            return pd.DataFrame(columns=PICK_COLUMNS)

        return pd.concat(frames, ignore_index=True)


def pick_stream(stream, config=None, logger=None, **kwargs) -> pd.DataFrame:
    """
    Pick every trace of an ObsPy Stream. See :meth:`FilterPicker.pick_phases`.

    Parameters
    ----------
    stream : `obspy.Stream` object
        Waveform data.
    config : :class:`PickerConfig`, optional
        Picker configuration. Default: the default configuration.
    logger : `logging.Logger`, optional
        Logger used for diagnostics.
    kwargs : dict
        Passed on to :meth:`FilterPicker.pick_phases`.

    Returns
    -------
    picks : `pandas.DataFrame` object

    """

    return FilterPicker(config, logger=logger).pick_phases(stream, **kwargs)
