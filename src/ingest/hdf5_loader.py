"""HDF5 dataset loading.

This module opens one HDF5 file, reads every declared dataset into
memory, validates dimensionality and row counts, and closes the file.
No file handle outlives a single ``load_file_bundle`` call.
"""

from __future__ import annotations

from typing import Any, Sequence

import h5py
import numpy as np

from core.constants import MIN_DATA_DIM
from core.errors import (
    H5FeedCloseError,
    H5FeedDatasetError,
    H5FeedFileError,
    H5FeedRowCountError,
)
from core.logging_config import get_logger
from core.types import FileBundle, NamedTensor

_LOGGER = get_logger(__name__)


def load_file_bundle(path: str, top_names: Sequence[str], dtype: str) -> FileBundle:
    """Load declared datasets from one HDF5 file.

    Args:
        path: HDF5 file path as listed in the manifest.
        top_names: Dataset names to read, in output order.
        dtype: Element type each dataset is converted to.

    Returns:
        Bundle of named tensors sharing one row count.

    Raises:
        H5FeedFileError: If the file cannot be opened.
        H5FeedDatasetError: If a dataset is missing or has no axes.
        H5FeedRowCountError: If datasets disagree on row count.
        H5FeedCloseError: If the file fails to close.
    """
    _LOGGER.debug("hdf5_file_loading", path=path)
    h5_file = _open_read_only(path)
    try:
        tensors = tuple(_read_named_tensor(h5_file, path, name, dtype) for name in top_names)
    finally:
        _close(h5_file, path)
    _validate_row_counts(path, tensors)
    _LOGGER.debug("hdf5_file_loaded", path=path, rows=tensors[0].row_count)
    return FileBundle(path=path, tensors=tensors)


def _open_read_only(path: str) -> Any:
    try:
        return h5py.File(path, "r")
    except OSError as error:
        _LOGGER.error("hdf5_file_unreadable", path=path, reason=str(error))
        raise H5FeedFileError(
            f"Failed opening HDF5 file: {path}: {error}. "
            "Check the manifest entry and file permissions."
        ) from error


def _close(h5_file: Any, path: str) -> None:
    try:
        h5_file.close()
    except (OSError, RuntimeError) as error:
        _LOGGER.error("hdf5_file_close_failed", path=path, reason=str(error))
        raise H5FeedCloseError(f"Failed to close HDF5 file: {path}: {error}.") from error


def _read_named_tensor(h5_file: Any, path: str, name: str, dtype: str) -> NamedTensor:
    """Read one dataset as a contiguous array of the layer element type.

    Args:
        h5_file: Open HDF5 file handle.
        path: File path for error context.
        name: Dataset name.
        dtype: Target element type.

    Returns:
        Named tensor holding the dataset contents.

    Raises:
        H5FeedDatasetError: If the dataset is absent, not numeric, or scalar.
    """
    node = h5_file.get(name)
    if not isinstance(node, h5py.Dataset):
        _LOGGER.error("hdf5_dataset_missing", path=path, dataset=name)
        raise H5FeedDatasetError(
            f"Failed to find HDF5 dataset '{name}' in {path}. "
            "Every file in the manifest must contain all configured tops."
        )
    if node.ndim < MIN_DATA_DIM:
        _LOGGER.error("hdf5_dataset_malformed", path=path, dataset=name, ndim=node.ndim)
        raise H5FeedDatasetError(
            f"HDF5 dataset '{name}' in {path} must have at least {MIN_DATA_DIM} axis, "
            f"got {node.ndim}."
        )
    if not np.issubdtype(node.dtype, np.number):
        _LOGGER.error("hdf5_dataset_malformed", path=path, dataset=name, dtype=str(node.dtype))
        raise H5FeedDatasetError(
            f"HDF5 dataset '{name}' in {path} must be numeric, got dtype {node.dtype}."
        )
    array = np.ascontiguousarray(node[()], dtype=dtype)
    return NamedTensor(name=name, array=array)


def _validate_row_counts(path: str, tensors: Sequence[NamedTensor]) -> None:
    row_count = tensors[0].row_count
    if row_count == 0:
        _LOGGER.error("hdf5_dataset_empty", path=path, dataset=tensors[0].name)
        raise H5FeedDatasetError(
            f"HDF5 dataset '{tensors[0].name}' in {path} has no rows. "
            "Remove the file from the manifest or add data."
        )
    for tensor in tensors[1:]:
        if tensor.row_count != row_count:
            _LOGGER.error(
                "hdf5_row_count_mismatch",
                path=path,
                dataset=tensor.name,
                expected=row_count,
                actual=tensor.row_count,
            )
            raise H5FeedRowCountError(
                f"HDF5 dataset '{tensor.name}' in {path} has {tensor.row_count} rows, "
                f"but '{tensors[0].name}' has {row_count}. All tops must share the first axis."
            )
