# -*- coding: utf-8 -*-
"""
FilterPicker - a Python package for real-time, multi-band picking of seismic phase
arrivals.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from importlib.metadata import version

from filterpicker.signal.bands import BandParameters  # NOQA
from filterpicker.signal.pickers import (  # NOQA
    FilterPicker,
    PickerConfig,
    PickRecord,
    Polarity,
    pick_stream,
)
from filterpicker.io import read_config  # NOQA


__version__ = version("filterpicker")
