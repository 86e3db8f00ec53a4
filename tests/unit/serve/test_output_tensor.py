"""Unit tests for output tensor buffers."""

from __future__ import annotations

import numpy as np
import pytest

from serve.output_tensor import OutputTensor


def test_reshape_updates_count_and_axes() -> None:
    """Reshape should expose the new per-axis sizes and element count."""
    tensor = OutputTensor("float32")

    tensor.reshape((4, 3, 2))

    assert tensor.count() == 24 and tensor.shape(0) == 4 and tensor.shape(-1) == 2
    assert tensor.num_axes() == 3 and tensor.data.dtype == np.float32


def test_shaped_view_shares_the_flat_buffer() -> None:
    """Writes through the flat buffer should be visible in the shaped view."""
    tensor = OutputTensor("int32", shape=(2, 2))

    tensor.data[3] = 7

    assert tensor.as_array()[1, 1] == 7


def test_reshape_rejects_negative_dimensions() -> None:
    """Negative dimensions are never valid."""
    tensor = OutputTensor()

    with pytest.raises(ValueError):
        tensor.reshape((2, -1))

    assert tensor.shape_tuple == (0,)
