"""Framework-side output tensor buffers.

This module provides the minimal tensor contract the data layer writes
into: reshape, element count, per-axis shape, and a writable row-major
buffer. Any object offering the same methods can stand in for it.
"""

from __future__ import annotations

from math import prod
from typing import Sequence

import numpy as np


class OutputTensor:
    """Reshapeable row-major buffer owned by the consuming framework."""

    def __init__(self, dtype: str = "float32", shape: Sequence[int] = (0,)) -> None:
        self._dtype = np.dtype(dtype)
        self._shape: tuple[int, ...] = ()
        self._buffer = np.zeros(0, dtype=self._dtype)
        self.reshape(shape)

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def shape_tuple(self) -> tuple[int, ...]:
        return self._shape

    @property
    def data(self) -> np.ndarray:
        """Writable flat view over the whole buffer."""
        return self._buffer

    def reshape(self, shape: Sequence[int]) -> None:
        """Resize the buffer to ``shape``, reallocating only when it grows."""
        new_shape = tuple(int(dim) for dim in shape)
        if any(dim < 0 for dim in new_shape):
            raise ValueError(f"Tensor dimensions must be non-negative, got {new_shape}")
        new_count = prod(new_shape)
        if new_count > self._buffer.size:
            self._buffer = np.zeros(new_count, dtype=self._dtype)
        else:
            self._buffer = self._buffer[:new_count]
        self._shape = new_shape

    def count(self) -> int:
        """Return the total number of elements."""
        return prod(self._shape)

    def shape(self, axis: int) -> int:
        """Return the size of one axis; negative axes count from the end."""
        return self._shape[axis]

    def num_axes(self) -> int:
        return len(self._shape)

    def as_array(self) -> np.ndarray:
        """Return a shaped view sharing memory with ``data``."""
        return self._buffer.reshape(self._shape)

    def __repr__(self) -> str:
        return f"OutputTensor(shape={self._shape}, dtype={self._dtype.name})"
