"""Core constants used across H5Feed modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_RANDOM_SEED = 42
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ELEMENT_DTYPE = "float32"
DEFAULT_PHASE = "train"
SUPPORTED_PHASES = ("train", "test")
MIN_DATA_DIM = 1
IMAGE_CHANNELS = 3
IMAGE_AXES = 4
IMAGE_VALUE_MIN = 0
IMAGE_VALUE_MAX = 255
DEFAULT_TRANSFORM_SCALE = 1.0
DEFAULT_CROP_SIZE = 0
DEFAULT_STREAM_BATCHES = 1
LAYER_CONFIG_KEYS = (
    "source",
    "batch_size",
    "tops",
    "shuffle",
    "image",
    "transform_param",
    "dtype",
    "phase",
)
TRANSFORM_PARAM_KEYS = ("scale", "mean_values", "crop_size", "mirror")
