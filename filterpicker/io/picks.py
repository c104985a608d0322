# -*- coding: utf-8 -*-
"""
Module to handle input/output of phase picks.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

import pathlib

import pandas as pd
from obspy import UTCDateTime


PICK_COLUMNS = [
    "TraceID",
    "BeginIndex",
    "EndIndex",
    "PickIndex",
    "PickTime",
    "PickError",
    "Polarity",
    "Amplitude",
    "Period",
    "NSamplesUpEvent",
    "FreqLow",
    "FreqHigh",
]


def picks_to_dataframe(
    picks: list,
    starttime: UTCDateTime | None = None,
    trace_id: str | None = None,
) -> pd.DataFrame:
    """
    Tabulate picks.

    Parameters
    ----------
    picks:
        Picks returned by a single call to
        :meth:`~filterpicker.signal.pickers.filterpicker.FilterPicker.feed`.
    starttime:
        Time of the first sample of the block the picks were returned for. If None,
        the "PickTime" column is left empty.
    trace_id:
        SEED id of the trace the picks were made on.

    Returns
    -------
     :
        Picks, one per row. Columns: ["TraceID", "BeginIndex", "EndIndex",
        "PickIndex", "PickTime", "PickError", "Polarity", "Amplitude", "Period",
        "NSamplesUpEvent", "FreqLow", "FreqHigh"]. "PickError" is the width of the
        uncertainty window, in seconds. "FreqLow" and "FreqHigh" bound the passband,
        in Hz, of the bands that triggered.

    """

    rows = []
    for pick in picks:
        pick_time = None
        if starttime is not None:
            pick_time = str(pick.times(starttime)[1])
        rows.append(
            [
                trace_id,
                pick.begin_index,
                pick.end_index,
                pick.pick_index,
                pick_time,
                pick.uncertainty,
                pick.polarity.label,
                pick.amplitude,
                pick.period,
                pick.n_samples_up_event_used,
                pick.frequency_low,
                pick.frequency_high,
            ]
        )

    return pd.DataFrame(rows, columns=PICK_COLUMNS)


def write_picks(
    picks: pd.DataFrame, fname: str | pathlib.Path, precision: str = ".3g"
) -> None:
    """
    Write phase picks to a .picks (CSV) file.

    Parameters
    ----------
    picks:
        Picks, as returned by :func:`picks_to_dataframe`.
    fname:
        Path of the output file. Parent directories are created if needed.
    precision:
        Format specifier for the floating point "PickError", "Amplitude",
        "FreqLow" and "FreqHigh" columns.

    """

    fname = pathlib.Path(fname)
    fname.parent.mkdir(exist_ok=True, parents=True)

    # Work on a copy
    picks = picks.copy()

    # Set floating point precision for output file
    for col in ["PickError", "Amplitude", "FreqLow", "FreqHigh"]:
        picks[col] = picks[col].map(lambda x: f"{x:{precision}}", na_action="ignore")

    picks.to_csv(fname, index=False)


def read_picks(fname: str | pathlib.Path) -> pd.DataFrame:
    """
    Read phase picks from a .picks (CSV) file.

    Parameters
    ----------
    fname:
        Path of the .picks file.

    Returns
    -------
     :
        Picks, see :func:`picks_to_dataframe` for the columns. "PickTime" is parsed
        to `obspy.UTCDateTime` and "Polarity" is an empty string where unknown.

    """

    picks = pd.read_csv(fname, dtype={"TraceID": str, "Polarity": str})
    picks["Polarity"] = picks["Polarity"].fillna("")
    picks["PickTime"] = picks["PickTime"].apply(
        lambda x: UTCDateTime(x) if isinstance(x, str) else None
    )

    return picks
