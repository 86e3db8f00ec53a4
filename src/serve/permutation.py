"""Index permutations for file and row ordering.

The data layer keeps two independent permutations: one over manifest
files and one over the rows of the currently loaded file.
"""

from __future__ import annotations

import random


class Permutation:
    """In-place shuffleable permutation of ``[0, size)``."""

    def __init__(self, randomizer: random.Random, size: int = 0) -> None:
        self._randomizer = randomizer
        self._indices: list[int] = list(range(size))

    def identity(self, size: int) -> None:
        """Reset to the identity permutation of ``size`` indices."""
        self._indices = list(range(size))

    def reshuffle(self) -> None:
        """Apply a uniform random reorder using the shared randomizer."""
        self._randomizer.shuffle(self._indices)

    def clear(self) -> None:
        self._indices = []

    def as_tuple(self) -> tuple[int, ...]:
        return tuple(self._indices)

    def __getitem__(self, position: int) -> int:
        return self._indices[position]

    def __len__(self) -> int:
        return len(self._indices)
