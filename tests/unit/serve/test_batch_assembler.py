"""Unit tests for batch assembly helpers."""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from core.errors import H5FeedDatasetError
from core.types import FileBundle, NamedTensor
from serve.batch_assembler import BatchAssembler, chw_to_hwc_image
from serve.output_tensor import OutputTensor


class _RecordingTransformer:
    """Transformer double that keeps every image it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[np.ndarray, int]] = []

    def infer_shape(self, height: int, width: int) -> tuple[int, ...]:
        return (3, height, width)

    def transform(self, image: np.ndarray, output: Any, sample_index: int) -> None:
        self.calls.append((image.copy(), sample_index))


def _bundle() -> FileBundle:
    data = NamedTensor("data", np.arange(12, dtype=np.float32).reshape(4, 3))
    label = NamedTensor("label", np.array([10, 11, 12, 13], dtype=np.float32))
    return FileBundle(path="a.h5", tensors=(data, label))


def test_write_sample_copies_rows_into_slots() -> None:
    """Each output slot should equal the selected source row."""
    outputs = (OutputTensor(shape=(2, 3)), OutputTensor(shape=(2,)))
    assembler = BatchAssembler(batch_size=2)

    assembler.write_sample(_bundle(), 3, outputs, 0)
    assembler.write_sample(_bundle(), 1, outputs, 1)

    assert outputs[0].as_array().tolist() == [[9, 10, 11], [3, 4, 5]]
    assert outputs[1].as_array().tolist() == [13, 11]


def test_chw_to_hwc_image_interleaves_channels() -> None:
    """Pixel (h, w) channel c should come from source index c*H*W + h*W + w."""
    channel_major = np.array([[[[1, 2], [3, 4]], [[5, 6], [7, 8]], [[9, 10], [11, 12]]]])
    tensor = NamedTensor("data", channel_major.astype(np.float32))

    image = chw_to_hwc_image(tensor, 0)

    assert image.shape == (2, 2, 3) and image.dtype == np.uint8
    assert image[0, 0].tolist() == [1, 5, 9]
    assert image[0, 1].tolist() == [2, 6, 10]
    assert image[1, 0].tolist() == [3, 7, 11]
    assert image[1, 1].tolist() == [4, 8, 12]


def test_chw_to_hwc_image_clips_to_byte_range() -> None:
    """Out-of-range values should saturate and fractions truncate."""
    values = np.array([-5.0, 300.0, 12.7], dtype=np.float32).reshape(1, 3, 1, 1)

    image = chw_to_hwc_image(NamedTensor("data", values), 0)

    assert image[0, 0].tolist() == [0, 255, 12]


def test_chw_to_hwc_image_rejects_non_rgb_datasets() -> None:
    """Only (N, 3, H, W) datasets can feed the image path."""
    tensor = NamedTensor("data", np.zeros((2, 1, 4, 4), dtype=np.float32))

    with pytest.raises(H5FeedDatasetError):
        chw_to_hwc_image(tensor, 0)

    assert True


def test_write_sample_routes_output_zero_through_transformer() -> None:
    """On the image path output 0 goes to the transformer, others are copied."""
    images = NamedTensor("data", np.arange(24, dtype=np.float32).reshape(2, 3, 2, 2))
    labels = NamedTensor("label", np.array([[5.0], [6.0]], dtype=np.float32))
    bundle = FileBundle(path="a.h5", tensors=(images, labels))
    transformer = _RecordingTransformer()
    outputs = (OutputTensor(shape=(1, 3, 2, 2)), OutputTensor(shape=(1, 1)))

    BatchAssembler(batch_size=1, transformer=transformer).write_sample(bundle, 1, outputs, 0)

    image, sample_index = transformer.calls[0]
    assert sample_index == 0 and image[0, 0].tolist() == [12, 16, 20]
    assert outputs[1].as_array().tolist() == [[6.0]]
    assert outputs[0].as_array().sum() == 0
