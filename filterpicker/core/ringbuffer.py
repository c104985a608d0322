# -*- coding: utf-8 -*-
"""
Fixed-capacity circular sample memory backed by a preallocated NumPy array.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

from __future__ import annotations

import numpy as np


class RingBuffer:
    """
    Circular buffer holding the most recent `capacity` samples of a (possibly
    multi-band) quantity.

    The first axis of the underlying array is the ring axis. Each call to
    :meth:`push` advances the write pointer by exactly one slot; values are addressed
    by how many samples back they were written, so callers never handle wrapped
    indices themselves.

    Parameters
    ----------
    capacity : int
        Number of samples held.
    item_shape : tuple of int, optional
        Shape of a single sample, e.g. `(n_bands,)`. Default: scalar samples.
    dtype : numpy dtype, optional
        Data type of the stored values. Default: float.
    fill : float or int, optional
        Value the buffer is initialised with. Default: 0.

    Attributes
    ----------
    capacity : int
        Number of samples held.
    pointer : int
        Slot that was last written (the "current" sample).
    values : `numpy.ndarray`
        The raw ring storage, of shape `(capacity, *item_shape)`.

    Raises
    ------
    ValueError
        If `capacity` is less than 1.

    """

    def __init__(
        self,
        capacity: int,
        item_shape: tuple = (),
        dtype=float,
        fill=0,
    ) -> None:
        capacity = int(capacity)
        if capacity < 1:
            raise ValueError(f"RingBuffer capacity must be positive, got {capacity}.")

        self.capacity = capacity
        self.values = np.full((capacity, *item_shape), fill, dtype=dtype)
        self.pointer = 0
        self._count = 0

    def __len__(self) -> int:
        """Number of samples written so far, saturating at `capacity`."""
        return self._count

    def __repr__(self) -> str:
        return (
            f"RingBuffer(capacity={self.capacity}, item_shape={self.values.shape[1:]}, "
            f"pointer={self.pointer})"
        )

    def push(self, value) -> None:
        """Advance the write pointer by one slot and store `value` there."""
        self.pointer = (self.pointer + 1) % self.capacity
        self.values[self.pointer] = value
        if self._count < self.capacity:
            self._count += 1

    def slot(self, offset_back: int) -> int:
        """Ring slot of the sample written `offset_back` samples before the current."""
        return (self.pointer - offset_back) % self.capacity

    def at(self, offset_back: int = 0):
        """
        Return the sample written `offset_back` samples ago (0 is the current sample).

        Parameters
        ----------
        offset_back : int, optional
            Number of samples back from the current sample, in [0, capacity).

        Raises
        ------
        IndexError
            If `offset_back` is outside [0, capacity).

        """

        if not 0 <= offset_back < self.capacity:
            raise IndexError(
                f"offset_back {offset_back} outside ring of capacity {self.capacity}."
            )
        return self.values[self.slot(offset_back)]

    def last(self, n: int, offset_back: int = 0) -> np.ndarray:
        """
        Return `n` consecutive samples, oldest first, ending `offset_back` samples
        before the current sample.

        Parameters
        ----------
        n : int
            Number of samples to return.
        offset_back : int, optional
            Offset of the newest returned sample from the current sample.

        Returns
        -------
        window : `numpy.ndarray`
            Copy of the requested samples, of shape `(n, *item_shape)`.

        Raises
        ------
        IndexError
            If the requested window reaches further back than the ring holds.

        """

        if n < 0 or offset_back < 0 or n + offset_back > self.capacity:
            raise IndexError(
                f"Window of {n} samples ending {offset_back} back exceeds ring of "
                f"capacity {self.capacity}."
            )
        oldest = self.pointer - offset_back - n + 1
        return self.values.take(np.arange(oldest, oldest + n), axis=0, mode="wrap")
