"""PyTorch DataLoader integration for the HDF5 data layer.

This module exposes successive layer forwards as a PyTorch stream.
Each yielded item is one batch: a tuple of tensors in top order.
"""

from __future__ import annotations

from typing import Any, Iterator

from core.errors import H5FeedDependencyError
from serve.hdf5_data_layer import HDF5DataLayer


def create_pytorch_dataloader(layer: HDF5DataLayer, num_batches: int | None = None) -> Any:
    """Create a PyTorch DataLoader streaming batches from a data layer.

    Args:
        layer: Data layer; ``setup`` is called if it has no outputs yet.
        num_batches: Number of batches to yield, or None for an endless stream.

    Returns:
        torch.utils.data.DataLoader instance.

    Raises:
        H5FeedDependencyError: If torch is unavailable.
    """
    try:
        import torch
    except ImportError as error:
        raise H5FeedDependencyError(
            "PyTorch DataLoader integration requires torch, but it is not installed. "
            "Install torch to stream HDF5 batches into training."
        ) from error
    if not layer.outputs:
        layer.setup()
    dataset = _build_batch_dataset(torch, layer, num_batches)
    return torch.utils.data.DataLoader(dataset, batch_size=None)


def _build_batch_dataset(torch: Any, layer: HDF5DataLayer, num_batches: int | None) -> Any:
    """Wrap layer forwards in a torch ``IterableDataset``."""

    class _LayerBatchDataset(torch.utils.data.IterableDataset):
        def __iter__(self) -> Iterator[tuple[Any, ...]]:
            emitted = 0
            while num_batches is None or emitted < num_batches:
                outputs = layer.forward()
                yield tuple(torch.from_numpy(output.as_array().copy()) for output in outputs)
                emitted += 1

    return _LayerBatchDataset()
