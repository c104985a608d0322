# -*- coding: utf-8 -*-
"""
The :mod:`filterpicker.io` module handles the various input/output operations performed
by the picker. This includes:

    * Reading picker configurations from TOML files.
    * Tabulating picks, and reading and writing them as .picks (CSV) files.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from .config import config_from_parameters, read_config, read_parameters  # NOQA
from .picks import PICK_COLUMNS, picks_to_dataframe, read_picks, write_picks  # NOQA
