# -*- coding: utf-8 -*-
"""
The :mod:`filterpicker.signal` module handles the core of the picking method.
This includes:

    * Layout and validation of the filter bands.
    * Recursive bandpass filtering of the raw data.
    * Generation of the characteristic (onset) function from the filtered data.
    * Triggering and confirmation of picks, with their uncertainty and polarity.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from .bands import BandParameters  # NOQA
from .filters import BandFilterBank  # NOQA
from .pickers import FilterPicker, PickerConfig, PickRecord, Polarity  # NOQA
