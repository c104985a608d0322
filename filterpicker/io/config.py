# -*- coding: utf-8 -*-
"""
Module to read picker configurations from TOML files.

A configuration file holds the picker options in a `[picker]` table, e.g.::

    [picker]
    filter_window = 10.0
    long_term_window = 30.0
    threshold1 = 10.0
    threshold2 = 8.0
    t_up_event = 5.0
    t_up_event_min = 1.0

Explicit bands may be given in place of `filter_window`, either as a band parameter
string or as an array of `[period, threshold_scale_factor]` pairs.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

import logging
import pathlib
import tomllib

from filterpicker.signal.pickers import PickerConfig


def read_parameters(fname: str | pathlib.Path) -> dict:
    """
    Parse a TOML configuration file.

    Parameters
    ----------
    fname:
        Path of the TOML file.

    Returns
    -------
     :
        Contents of the file, as nested dictionaries.

    """

    with pathlib.Path(fname).open("rb") as f:
        parameters = tomllib.load(f)

    logging.debug(f"\tRead configuration file {fname}")

    return parameters


def config_from_parameters(parameters: dict, logger=None) -> PickerConfig:
    """
    Build a picker configuration from the `[picker]` table of parsed TOML contents.

    Parameters
    ----------
    parameters:
        Contents of a configuration file, as returned by :func:`read_parameters`.
    logger:
        Logger used to report warnings about the band layout.

    Returns
    -------
     :
        Validated picker configuration.

    Raises
    ------
    KeyError
        If there is no `[picker]` table.
    ConfigError
        If any option is invalid.

    """

    if "picker" not in parameters:
        raise KeyError("No [picker] table in configuration.")

    return PickerConfig.create(logger=logger, **parameters["picker"])


def read_config(fname: str | pathlib.Path, logger=None) -> PickerConfig:
    """
    Read a picker configuration from the `[picker]` table of a TOML file.

    Parameters
    ----------
    fname:
        Path of the TOML file.
    logger:
        Logger used to report warnings about the band layout.

    Returns
    -------
     :
        Validated picker configuration.

    Raises
    ------
    KeyError
        If the file has no `[picker]` table.
    ConfigError
        If any option is invalid.

    """

    return config_from_parameters(read_parameters(fname), logger=logger)
