# -*- coding: utf-8 -*-
"""
A simple abstract base class with method stubs enabling alternative phase pickers to
share the outputs of the package.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

import pathlib
from abc import ABC, abstractmethod

import pandas as pd


class PhasePicker(ABC):
    """
    Abstract base class providing a simple way of swapping in another picking method.

    Attributes
    ----------
    precision : str
        Format specifier used for floating point columns when writing picks.

    """

    def __init__(self, **kwargs) -> None:
        """Instantiate the PhasePicker object."""
        self.precision = kwargs.get("precision", ".3g")

    def __str__(self) -> str:
        """Returns a short summary string of the PhasePicker object."""
        return (
            "Abstract PhasePicker object - consider adding a __str__ "
            "method to your custom PhasePicker class that gives the user "
            "relevant information about the object."
        )

    @abstractmethod
    def pick_phases(self, stream):
        """Method stub for phase picking."""
        pass

    def write(self, picks: pd.DataFrame, fname: str | pathlib.Path) -> None:
        """
        Write phase picks to a .picks (CSV) file.

        Parameters
        ----------
        picks:
            Phase picks, as returned by :meth:`pick_phases`, see
            :func:`~filterpicker.io.picks.picks_to_dataframe` for the columns.
        fname:
            Path of the output file. Parent directories are created if needed.

        """

        from filterpicker.io.picks import write_picks

        write_picks(picks, fname, precision=self.precision)
