# -*- coding: utf-8 -*-
"""
The :mod:`filterpicker.signal.onsets` module computes the onset (characteristic)
function on which picks are declared: per-band long-term noise statistics and the
normalised, clipped characteristic function reduced across bands.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from .charfunc import CharacteristicFunction, CharacteristicFunctionEngine  # NOQA
from .statistics import AdaptiveStatistics  # NOQA
