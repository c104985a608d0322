# -*- coding: utf-8 -*-
"""
The :mod:`filterpicker.export` module provides some utility functions to export the
picks made by FilterPicker to other formats:

    * ObsPy Pick objects

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""
