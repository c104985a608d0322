# -*- coding: utf-8 -*-
"""
The :mod:`filterpicker.core` module provides the low-level data structures on which
the picker state is built:

    * :class:`~filterpicker.core.ringbuffer.RingBuffer` - fixed-capacity circular \
    sample memory with "N samples back" addressing.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from .ringbuffer import RingBuffer

__all__ = [RingBuffer]
