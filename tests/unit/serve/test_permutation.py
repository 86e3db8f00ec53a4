"""Unit tests for index permutations."""

from __future__ import annotations

import random

from serve.permutation import Permutation


def test_identity_orders_indices() -> None:
    """Identity should list every index in ascending order."""
    permutation = Permutation(random.Random(0))
    permutation.identity(4)

    assert permutation.as_tuple() == (0, 1, 2, 3) and len(permutation) == 4


def test_reshuffle_is_a_bijection() -> None:
    """Reshuffling should reorder indices without dropping or duplicating any."""
    permutation = Permutation(random.Random(3), size=50)

    permutation.reshuffle()

    assert sorted(permutation.as_tuple()) == list(range(50))
    assert permutation.as_tuple() != tuple(range(50))


def test_reshuffle_is_deterministic_for_a_seed() -> None:
    """Equal seeds should yield equal shuffles."""
    first = Permutation(random.Random(11), size=20)
    second = Permutation(random.Random(11), size=20)

    first.reshuffle()
    second.reshuffle()

    assert first.as_tuple() == second.as_tuple()


def test_clear_empties_the_permutation() -> None:
    """Clearing should release all indices."""
    permutation = Permutation(random.Random(0), size=3)

    permutation.clear()

    assert len(permutation) == 0
