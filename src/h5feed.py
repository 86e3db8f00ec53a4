"""Public SDK surface for H5Feed.

This module provides a stable import path for data layer users.
It re-exports the layer, its config model, and the PyTorch bridge.
"""

from __future__ import annotations

from core.config import H5FeedConfig
from core.layer_config import layer_config_from_mapping, load_layer_config
from core.logging_config import configure_logging
from core.types import DataLayerConfig, FileBundle, NamedTensor
from ingest.hdf5_loader import load_file_bundle
from ingest.manifest_reader import read_manifest
from serve.hdf5_data_layer import HDF5DataLayer
from serve.image_transform import DataTransformer, ImageTransformer
from serve.output_tensor import OutputTensor
from serve.torch_stream import create_pytorch_dataloader

__all__ = [
    "DataLayerConfig",
    "DataTransformer",
    "FileBundle",
    "H5FeedConfig",
    "HDF5DataLayer",
    "ImageTransformer",
    "NamedTensor",
    "OutputTensor",
    "configure_logging",
    "create_pytorch_dataloader",
    "layer_config_from_mapping",
    "load_file_bundle",
    "load_layer_config",
    "read_manifest",
]
