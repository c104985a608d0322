# -*- coding: utf-8 -*-
"""
This module provides parsers to export the picks made by FilterPicker to ObsPy.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

import pandas as pd

from obspy import UTCDateTime
from obspy.core import AttribDict
from obspy.core.event import CreationInfo, Pick, WaveformStreamID

import filterpicker


ns = "http://filterpicker.github.io/xmlns/pick"

POLARITY_MAP = {"up": "positive", "down": "negative", "": "undecidable"}


def picks_to_obspy(picks, phase_hint=None):
    """
    Convert a table of picks into ObsPy Pick objects.

    Parameters
    ----------
    picks : `pandas.DataFrame` object
        Picks, as returned by
        :meth:`~filterpicker.signal.pickers.filterpicker.FilterPicker.pick_phases` or
        :func:`~filterpicker.io.picks.read_picks`. Rows without a "PickTime" are
        skipped.
    phase_hint : str, optional
        Phase hint to attach to every pick, e.g. "P".

    Returns
    -------
    obspy_picks : list of `obspy.core.event.Pick` objects
        One pick per row, with the width of the uncertainty window as the time
        uncertainty. The period and amplitude of the triggering band and the
        passband corners of the triggered bands are attached as extra attributes.

    """

    creation_info = CreationInfo(
        agency_id="FilterPicker",
        author=f"FilterPicker {filterpicker.__version__}",
        creation_time=UTCDateTime(),
    )

    obspy_picks = []
    for _, pickline in picks.iterrows():
        if pd.isna(pickline["PickTime"]):
            continue

        pick = Pick()
        pick.extra = AttribDict()
        if isinstance(pickline["TraceID"], str):
            pick.waveform_id = WaveformStreamID(seed_string=pickline["TraceID"])
        pick.method_id = "filterpicker"
        pick.evaluation_mode = "automatic"
        pick.creation_info = creation_info
        if phase_hint is not None:
            pick.phase_hint = phase_hint
        pick.time = UTCDateTime(pickline["PickTime"])
        pick.time_errors.uncertainty = float(pickline["PickError"])
        polarity = pickline["Polarity"]
        pick.polarity = POLARITY_MAP[polarity if isinstance(polarity, str) else ""]
        pick.extra.period = {"value": float(pickline["Period"]), "namespace": ns}
        pick.extra.amplitude = {"value": float(pickline["Amplitude"]), "namespace": ns}
        pick.extra.freq_low = {"value": float(pickline["FreqLow"]), "namespace": ns}
        pick.extra.freq_high = {"value": float(pickline["FreqHigh"]), "namespace": ns}

        obspy_picks.append(pick)

    return obspy_picks
