"""Unit tests for the file and row cursor."""

from __future__ import annotations

from serve.cursor import Cursor


def test_advance_reports_file_exhaustion() -> None:
    """Advance should report exhaustion exactly when the last row is passed."""
    cursor = Cursor()

    steps = [cursor.advance(3) for _ in range(4)]

    assert steps == [False, False, True, False]
    assert cursor.row_index == 1


def test_next_file_wraps_to_first_file() -> None:
    """Stepping past the last file should wrap to zero and report it."""
    cursor = Cursor()

    wraps = [cursor.next_file(3) for _ in range(3)]

    assert wraps == [False, False, True] and cursor.file_index == 0


def test_reset_returns_to_origin() -> None:
    """Reset should move back to the first row of the first file."""
    cursor = Cursor(file_index=2, row_index=5)

    cursor.reset()

    assert (cursor.file_index, cursor.row_index) == (0, 0)
