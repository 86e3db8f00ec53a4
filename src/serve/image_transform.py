"""Per-sample image transforms for the image data path.

This module defines the transformer contract the data layer hands HWC
images to, plus a default implementation covering scale, per-channel
mean subtraction, cropping, and mirroring.
"""

from __future__ import annotations

import random
from typing import Any, Mapping, Protocol, Sequence

import numpy as np

from core.constants import DEFAULT_CROP_SIZE, DEFAULT_TRANSFORM_SCALE, IMAGE_CHANNELS
from core.errors import H5FeedConfigError, H5FeedShapeError
from core.types import Phase


class DataTransformer(Protocol):
    """Contract for transforms applied to one image sample."""

    def infer_shape(self, height: int, width: int) -> tuple[int, ...]:
        """Return the per-sample output shape for an ``height x width`` image."""
        ...

    def transform(self, image: np.ndarray, output: Any, sample_index: int) -> None:
        """Write the transformed ``(H, W, 3)`` uint8 image into slot ``sample_index``."""
        ...


class ImageTransformer:
    """Default transformer producing CHW samples.

    Args:
        scale: Multiplier applied after mean subtraction.
        mean_values: One value for all channels or one per channel.
        crop_size: Square crop edge; 0 keeps the full image.
        mirror: Flip horizontally at random during training.
        phase: ``train`` uses random crops and mirrors, ``test`` center crops.
        randomizer: Random source for crop offsets and mirroring.
    """

    def __init__(
        self,
        scale: float = DEFAULT_TRANSFORM_SCALE,
        mean_values: Sequence[float] = (),
        crop_size: int = DEFAULT_CROP_SIZE,
        mirror: bool = False,
        phase: Phase = "train",
        randomizer: random.Random | None = None,
    ) -> None:
        self._scale = scale
        self._mean = _mean_vector(mean_values)
        self._crop_size = crop_size
        self._mirror = mirror
        self._phase = phase
        self._randomizer = randomizer or random.Random()

    def infer_shape(self, height: int, width: int) -> tuple[int, ...]:
        if self._crop_size == 0:
            return (IMAGE_CHANNELS, height, width)
        if self._crop_size > height or self._crop_size > width:
            raise H5FeedConfigError(
                f"crop_size {self._crop_size} exceeds image size {height}x{width}. "
                "Lower transform_param.crop_size."
            )
        return (IMAGE_CHANNELS, self._crop_size, self._crop_size)

    def transform(self, image: np.ndarray, output: Any, sample_index: int) -> None:
        height, width = int(image.shape[0]), int(image.shape[1])
        sample = image.transpose(2, 0, 1).astype(np.float64)
        if self._crop_size:
            h_off, w_off = self._crop_offsets(height, width)
            sample = sample[
                :, h_off : h_off + self._crop_size, w_off : w_off + self._crop_size
            ]
        if self._mirror and self._phase == "train" and self._randomizer.randint(0, 1):
            sample = sample[:, :, ::-1]
        sample = (sample - self._mean) * self._scale
        sample_size = output.count() // output.shape(0)
        if sample.size != sample_size:
            raise H5FeedShapeError(
                f"Transformed image has {sample.size} elements but the output slot "
                f"holds {sample_size}."
            )
        if np.issubdtype(output.data.dtype, np.integer):
            limits = np.iinfo(output.data.dtype)
            sample = np.clip(sample, limits.min, limits.max)
        start = sample_index * sample_size
        output.data[start : start + sample_size] = sample.reshape(-1)

    def _crop_offsets(self, height: int, width: int) -> tuple[int, int]:
        if self._phase == "train":
            return (
                self._randomizer.randint(0, height - self._crop_size),
                self._randomizer.randint(0, width - self._crop_size),
            )
        return (height - self._crop_size) // 2, (width - self._crop_size) // 2


def build_data_transformer(
    transform_param: Mapping[str, object],
    phase: Phase,
    random_seed: int,
) -> ImageTransformer:
    """Build the default transformer from a ``transform_param`` mapping.

    Args:
        transform_param: Values for scale, mean_values, crop_size, and mirror.
        phase: Network phase.
        random_seed: Seed for crop and mirror randomness.

    Returns:
        Configured image transformer.

    Raises:
        H5FeedConfigError: If a transform parameter is invalid.
    """
    return ImageTransformer(
        scale=_parse_scale(transform_param.get("scale")),
        mean_values=_parse_mean_values(transform_param.get("mean_values")),
        crop_size=_parse_crop_size(transform_param.get("crop_size")),
        mirror=_parse_mirror(transform_param.get("mirror")),
        phase=phase,
        randomizer=random.Random(random_seed),
    )


def _mean_vector(mean_values: Sequence[float]) -> np.ndarray:
    if len(mean_values) == 0:
        return np.zeros((IMAGE_CHANNELS, 1, 1))
    if len(mean_values) == 1:
        return np.full((IMAGE_CHANNELS, 1, 1), float(mean_values[0]))
    if len(mean_values) == IMAGE_CHANNELS:
        return np.asarray(mean_values, dtype=np.float64).reshape(IMAGE_CHANNELS, 1, 1)
    raise H5FeedConfigError(
        f"transform_param.mean_values must have 1 or {IMAGE_CHANNELS} entries, "
        f"got {len(mean_values)}."
    )


def _parse_scale(value: object) -> float:
    if value is None:
        return DEFAULT_TRANSFORM_SCALE
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise H5FeedConfigError("transform_param.scale must be numeric.")
    return float(value)


def _parse_mean_values(value: object) -> tuple[float, ...]:
    if value is None:
        return ()
    if isinstance(value, bool):
        raise H5FeedConfigError("transform_param.mean_values must be numeric.")
    if isinstance(value, (int, float)):
        return (float(value),)
    if isinstance(value, Sequence) and not isinstance(value, str):
        if all(isinstance(item, (int, float)) and not isinstance(item, bool) for item in value):
            return tuple(float(item) for item in value)
    raise H5FeedConfigError("transform_param.mean_values must be a number or list of numbers.")


def _parse_crop_size(value: object) -> int:
    if value is None:
        return DEFAULT_CROP_SIZE
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise H5FeedConfigError("transform_param.crop_size must be a non-negative integer.")
    return value


def _parse_mirror(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise H5FeedConfigError("transform_param.mirror must be true/false.")
