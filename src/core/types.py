"""Shared typed models.

This module defines the data models used by ingest, serving,
SDK, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import prod
from typing import Literal, Mapping

import numpy as np

from core.constants import DEFAULT_ELEMENT_DTYPE, DEFAULT_PHASE

Phase = Literal["train", "test"]


@dataclass(frozen=True)
class NamedTensor:
    """One dataset read from an HDF5 file.

    Attributes:
        name: Dataset name, equal to the output (top) it feeds.
        array: C-contiguous array with at least one axis.
    """

    name: str
    array: np.ndarray

    @property
    def shape(self) -> tuple[int, ...]:
        """Full dataset shape ``(d0, d1, ...)``."""
        return tuple(int(dim) for dim in self.array.shape)

    @property
    def row_count(self) -> int:
        """Number of rows along the outermost axis."""
        return int(self.array.shape[0])

    @property
    def row_shape(self) -> tuple[int, ...]:
        """Shape of one row, i.e. the dataset shape without ``d0``."""
        return self.shape[1:]

    @property
    def row_size(self) -> int:
        """Number of elements in one row."""
        return prod(self.row_shape)

    def row(self, row_index: int) -> np.ndarray:
        """Return a flat view of one row."""
        start = row_index * self.row_size
        return self.array.reshape(-1)[start : start + self.row_size]


@dataclass(frozen=True)
class FileBundle:
    """All declared datasets loaded from one HDF5 file.

    Attributes:
        path: Path of the file, verbatim from the manifest.
        tensors: Named tensors in declared output order.
    """

    path: str
    tensors: tuple[NamedTensor, ...]

    @property
    def row_count(self) -> int:
        """Row count shared by every tensor in the bundle."""
        return self.tensors[0].row_count

    def __getitem__(self, top_index: int) -> NamedTensor:
        return self.tensors[top_index]

    def __len__(self) -> int:
        return len(self.tensors)


@dataclass(frozen=True)
class DataLayerConfig:
    """Configuration record for the HDF5 data layer.

    Attributes:
        source: Path to the manifest listing HDF5 files.
        batch_size: Samples written per forward call.
        tops: Ordered output names; each is a dataset in every listed file.
        shuffle: Shuffle files and rows, reshuffling on every wrap.
        image: Materialize output 0 as an HWC color image per sample.
        transform_param: Transformer parameters; with ``image`` enables transforms.
        dtype: Element type the datasets are converted to.
        phase: Network phase, which controls random crop and mirror.
    """

    source: str
    batch_size: int
    tops: tuple[str, ...]
    shuffle: bool = False
    image: bool = False
    transform_param: Mapping[str, object] | None = None
    dtype: str = DEFAULT_ELEMENT_DTYPE
    phase: Phase = DEFAULT_PHASE

    @property
    def uses_image_transform(self) -> bool:
        """Return whether output 0 goes through the image transform path."""
        return self.image and self.transform_param is not None
