"""Batch assembly from loaded HDF5 rows.

This module copies selected source rows into framework output tensors,
one sample slot at a time. On the image path, output 0 is rebuilt as an
interleaved color image and handed to a transformer instead.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from core.constants import IMAGE_AXES, IMAGE_CHANNELS, IMAGE_VALUE_MAX, IMAGE_VALUE_MIN
from core.errors import H5FeedDatasetError
from core.types import FileBundle, NamedTensor
from serve.image_transform import DataTransformer


class BatchAssembler:
    """Write source rows into sample slots of the output tensors.

    Args:
        batch_size: Number of sample slots per output tensor.
        transformer: When set, output 0 takes the image transform path.
    """

    def __init__(self, batch_size: int, transformer: DataTransformer | None = None) -> None:
        self._batch_size = batch_size
        self._transformer = transformer

    def write_sample(
        self,
        bundle: FileBundle,
        row: int,
        outputs: Sequence[Any],
        sample_index: int,
    ) -> None:
        """Materialize one source row into slot ``sample_index`` of every output.

        Args:
            bundle: Loaded tensors of the current file.
            row: Source row index within the bundle.
            outputs: Output tensors in top order.
            sample_index: Destination slot in ``[0, batch_size)``.
        """
        for top_index, output in enumerate(outputs):
            if top_index == 0 and self._transformer is not None:
                image = chw_to_hwc_image(bundle[0], row)
                self._transformer.transform(image, output, sample_index)
                continue
            row_stride = output.count() // self._batch_size
            start = sample_index * row_stride
            output.data[start : start + row_stride] = bundle[top_index].row(row)


def chw_to_hwc_image(tensor: NamedTensor, row: int) -> np.ndarray:
    """Build an interleaved ``(H, W, 3)`` uint8 image from a CHW row.

    Pixel ``(h, w)`` channel ``c`` comes from flat source index
    ``c*H*W + h*W + w``. Values are clipped to the 8-bit range and
    truncated toward zero.

    Args:
        tensor: Image dataset shaped ``(N, 3, H, W)``.
        row: Row to convert.

    Returns:
        Contiguous HWC image.
    """
    validate_image_tensor(tensor)
    channel_major = tensor.array[row]
    clipped = np.clip(channel_major, IMAGE_VALUE_MIN, IMAGE_VALUE_MAX)
    return np.ascontiguousarray(clipped.astype(np.uint8).transpose(1, 2, 0))


def validate_image_tensor(tensor: NamedTensor) -> None:
    """Check that a dataset holds 3-channel CHW images.

    Raises:
        H5FeedDatasetError: If the dataset is not shaped ``(N, 3, H, W)``.
    """
    shape = tensor.shape
    if len(shape) != IMAGE_AXES or shape[1] != IMAGE_CHANNELS:
        raise H5FeedDatasetError(
            f"Image dataset '{tensor.name}' must be shaped (N, {IMAGE_CHANNELS}, H, W), "
            f"got {shape}."
        )
