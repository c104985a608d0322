# -*- coding: utf-8 -*-
"""
Module that supplies various utility functions and classes.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

import logging
import sys
import time
from datetime import datetime
from functools import wraps

import numpy as np


log_spacer = "=" * 110

# Smallest positive normal single-precision float, used as the "effectively zero"
# guard throughout the picker.
FLOAT_MIN_NORMAL = float(np.finfo(np.float32).tiny)


def logger(logstem, log, loglevel="info"):
    """
    Simple logger that will output to both a log file and stdout.

    Parameters
    ----------
    logstem : `pathlib.Path` object
        Filestem for log file.
    log : bool
        Toggle for logging - default is to only print information to stdout.
        If True, will also create a log file.
    loglevel : str, optional
        Toggle for logging level - default is to print only "info" messages to log.
        To print more detailed "debug" messages, set to "debug".

    """

    level = logging.DEBUG if loglevel == "debug" else logging.INFO

    if log:
        now = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        logfile = logstem.parent / f"{logstem.name}_{now}"
        logfile.parent.mkdir(exist_ok=True, parents=True)
        handlers = [
            logging.FileHandler(str(logfile.with_suffix(".log"))),
            logging.StreamHandler(sys.stdout),
        ]
    else:
        handlers = [logging.StreamHandler(sys.stdout)]

    logging.basicConfig(level=level, format="%(message)s", handlers=handlers)


def time2sample(time, delta):
    """
    Utility function to convert a duration in seconds to a number of samples, rounded
    to the nearest sample.

    Parameters
    ----------
    time : float
        Duration to convert, in seconds.
    delta : float
        Sample interval, in seconds.

    Returns
    -------
    out : int
        Number of samples that corresponds to `time`.

    """

    return int(round(time / delta))


def timeit(*args_, **kwargs_):
    """Function wrapper that measures the time elapsed during its execution."""

    def inner_function(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            ts = time.time()
            result = func(*args, **kwargs)
            msg = " " * 21 + f"Elapsed time: {time.time() - ts:6f} seconds."
            try:
                if args_[0] == "info":
                    logging.info(msg)
            except IndexError:
                logging.debug(msg)
            return result

        return wrapper

    return inner_function


class ConfigError(Exception):
    """
    Base class for errors in the picker configuration. Raised when a configuration is
    created, never from within the sample loop.

    """

    pass


class InvalidParameterException(ConfigError):
    """
    Custom exception to handle a configuration value that is outside of its valid
    range.

    Parameters
    ----------
    name : str
        Name of the configuration option.
    value : float
        Value supplied for the option.
    valid : str
        Description of the valid range.

    """

    def __init__(self, name, value, valid):
        super().__init__(f"Invalid value for '{name}': {value} - must be {valid}.")


class ThresholdOrderException(ConfigError):
    """Custom exception to handle the case where threshold1 < threshold2."""

    def __init__(self, threshold1, threshold2):
        super().__init__(
            f"threshold1 ({threshold1}) must be greater than or equal to threshold2 "
            f"({threshold2})."
        )


class UpEventWindowException(ConfigError):
    """Custom exception to handle the case where t_up_event_min >= t_up_event."""

    def __init__(self, t_up_event_min, t_up_event):
        super().__init__(
            f"t_up_event_min ({t_up_event_min} s) must be shorter than t_up_event "
            f"({t_up_event} s)."
        )


class BandOrderException(ConfigError):
    """Custom exception to handle band periods that are not strictly increasing."""

    def __init__(self, periods):
        super().__init__(
            "Band parameters must be in order of strictly increasing period: "
            f"{', '.join(f'{p:g}' for p in periods)}"
        )


class NumPolesException(ConfigError):
    """
    Custom exception to handle a bandpass filter order that is not a multiple of 4 in
    the range [4, 16].

    """

    def __init__(self, num_poles):
        super().__init__(
            f"Invalid num_poles_bandpass: {num_poles} - must be a multiple of 4 "
            "between 4 and 16."
        )


class BandWidthFactorException(ConfigError):
    """
    Custom exception to handle band periods whose ratios vary too much from the mean
    bandwidth factor, or a bandwidth factor outside of [1.1, 100].

    Parameters
    ----------
    bandwidth_factor : float
        Mean ratio of consecutive band periods.
    variation : float, optional
        Largest percentage deviation of a single period ratio from the mean.

    """

    def __init__(self, bandwidth_factor, variation=None):
        if variation is None:
            msg = (
                f"Invalid bandwidth factor: {bandwidth_factor:g} - must be between "
                "1.1 and 100."
            )
        else:
            msg = (
                "Bandwidth factor between band periods varies from mean bandwidth "
                f"factor={bandwidth_factor:g} by {variation:.0f}% (> 10%)."
            )
        super().__init__(msg)


class BandParameterStringException(ConfigError):
    """Custom exception to handle a band parameter string that cannot be parsed."""

    def __init__(self, text, reason):
        super().__init__(f"Invalid band parameters '{text}': {reason}")


class NoBandsException(ConfigError):
    """Custom exception to handle a configuration with neither bands nor a window."""

    def __init__(self):
        super().__init__(
            "No filter bands have been set. Specify either explicit 'bands' or a "
            "'filter_window' from which to derive them."
        )


class NyquistException(ConfigError):
    """
    Custom exception to handle the case where a filter band has a period shorter than
    the Nyquist period of the data.

    Parameters
    ----------
    period : float
        Period of the offending band, in seconds.
    delta : float
        Sample interval of the data, in seconds.

    """

    def __init__(self, period, delta):
        super().__init__(
            f"    Band period {period:g} s is shorter than the Nyquist period "
            f"({2.0 * delta:g} s) for a sample interval of {delta:g} s."
        )


class ConfigErrors(ConfigError):
    """
    Collects every validation error found in a single configuration.

    Parameters
    ----------
    errors : list of `ConfigError`
        The individual validation errors.

    """

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))


class StreamError(Exception):
    """Base class for fatal errors in the stream of samples fed to a picker."""

    pass


class SampleIntervalChangedException(StreamError):
    """
    Custom exception to handle a sample interval that differs from the one established
    on the first block of samples.

    """

    def __init__(self, delta, new_delta):
        super().__init__(f"Data sample interval changed: {delta} -> {new_delta}")
