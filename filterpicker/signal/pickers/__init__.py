# -*- coding: utf-8 -*-
"""
The :mod:`filterpicker.signal.pickers` module handles the picking of seismic phases
from the characteristic function, and the polarity and uncertainty of each pick.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from .base import PhasePicker  # NOQA
from .filterpicker import (  # NOQA
    FilterPicker,
    PickerConfig,
    PickerState,
    initialise_state,
    pick_stream,
)
from .pickdata import PickRecord, Polarity  # NOQA
from .trigger import GateState, PickStateMachine, TriggerWindowBuffer  # NOQA
