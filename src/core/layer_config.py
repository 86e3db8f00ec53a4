"""Typed data layer configuration parsing.

This module loads and validates the YAML record that configures one
HDF5 data layer. CLI, SDK, and tests all build layers from the same
strict schema.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

import numpy as np
import yaml

from core.constants import (
    DEFAULT_ELEMENT_DTYPE,
    DEFAULT_PHASE,
    LAYER_CONFIG_KEYS,
    SUPPORTED_PHASES,
    TRANSFORM_PARAM_KEYS,
)
from core.errors import H5FeedConfigError
from core.types import DataLayerConfig, Phase


def load_layer_config(config_path: str) -> DataLayerConfig:
    """Load and validate a YAML layer config from disk.

    Args:
        config_path: File path to the YAML config.

    Returns:
        Fully validated layer config.

    Raises:
        H5FeedConfigError: If the file is unreadable or schema checks fail.
    """
    config_file = Path(config_path).expanduser().resolve()
    if not config_file.exists():
        raise H5FeedConfigError(
            f"Layer config file does not exist at {config_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(config_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise H5FeedConfigError(
            f"Failed to read layer config at {config_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise H5FeedConfigError(
            f"Failed to parse YAML layer config at {config_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise H5FeedConfigError(
            f"Layer config at {config_file} is empty. Define 'source', 'batch_size' and 'tops'."
        )
    return layer_config_from_mapping(_expect_mapping(payload, "layer config root"))


def layer_config_from_mapping(values: Mapping[str, object]) -> DataLayerConfig:
    """Validate a raw mapping into a layer config.

    Args:
        values: Parsed configuration values.

    Returns:
        Validated layer config.

    Raises:
        H5FeedConfigError: If a field is missing, unknown, or invalid.
    """
    _validate_keys(values, LAYER_CONFIG_KEYS, "layer config")
    return DataLayerConfig(
        source=_required_string(values, "source"),
        batch_size=_parse_batch_size(values),
        tops=_parse_tops(values),
        shuffle=_optional_bool(values, "shuffle", False),
        image=_optional_bool(values, "image", False),
        transform_param=_parse_transform_param(values.get("transform_param")),
        dtype=_parse_dtype(values),
        phase=_parse_phase(values),
    )


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise H5FeedConfigError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise H5FeedConfigError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _validate_keys(values: Mapping[str, object], allowed: Sequence[str], context: str) -> None:
    unknown_keys = sorted(set(values.keys()) - set(allowed))
    if unknown_keys:
        supported_rows = ", ".join(allowed)
        raise H5FeedConfigError(
            f"Unsupported {context} field(s): {', '.join(unknown_keys)}. "
            f"Use only: {supported_rows}."
        )


def _required_string(values: Mapping[str, object], field_name: str) -> str:
    value = values.get(field_name)
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise H5FeedConfigError(
        f"Layer config is missing required string field '{field_name}'."
    )


def _optional_bool(values: Mapping[str, object], field_name: str, default_value: bool) -> bool:
    value = values.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, bool):
        return value
    raise H5FeedConfigError(f"Layer config field '{field_name}' must be true/false.")


def _parse_batch_size(values: Mapping[str, object]) -> int:
    value = values.get("batch_size")
    if isinstance(value, bool) or not isinstance(value, int):
        raise H5FeedConfigError("Layer config field 'batch_size' must be an integer.")
    if value < 1:
        raise H5FeedConfigError(
            f"Layer config field 'batch_size' must be positive, got {value}."
        )
    return value


def _parse_tops(values: Mapping[str, object]) -> tuple[str, ...]:
    raw_tops = values.get("tops")
    if isinstance(raw_tops, str) or not isinstance(raw_tops, Sequence):
        raise H5FeedConfigError(
            "Layer config field 'tops' must be a list of dataset names, e.g. [data, label]."
        )
    tops = []
    for index, raw_name in enumerate(raw_tops):
        if not isinstance(raw_name, str) or not raw_name.strip():
            raise H5FeedConfigError(
                f"Layer config top #{index + 1} must be a non-empty string."
            )
        tops.append(raw_name.strip())
    if not tops:
        raise H5FeedConfigError("Layer config field 'tops' must name at least one dataset.")
    if len(set(tops)) != len(tops):
        raise H5FeedConfigError(f"Layer config field 'tops' has duplicate names: {tops}.")
    return tuple(tops)


def _parse_transform_param(raw_value: object) -> Mapping[str, object] | None:
    if raw_value is None:
        return None
    transform_param = _expect_mapping(raw_value, "transform_param")
    _validate_keys(transform_param, TRANSFORM_PARAM_KEYS, "transform_param")
    return transform_param


def _parse_dtype(values: Mapping[str, object]) -> str:
    value = values.get("dtype", DEFAULT_ELEMENT_DTYPE)
    if not isinstance(value, str):
        raise H5FeedConfigError("Layer config field 'dtype' must be a string, e.g. float32.")
    try:
        dtype = np.dtype(value)
    except TypeError as error:
        raise H5FeedConfigError(
            f"Invalid dtype '{value}'. Use a numpy numeric type such as float32."
        ) from error
    if not np.issubdtype(dtype, np.number):
        raise H5FeedConfigError(f"Layer config dtype '{value}' must be numeric.")
    return dtype.name


def _parse_phase(values: Mapping[str, object]) -> Phase:
    value = values.get("phase", DEFAULT_PHASE)
    if value in SUPPORTED_PHASES:
        return cast(Phase, value)
    supported_rows = ", ".join(SUPPORTED_PHASES)
    raise H5FeedConfigError(f"Invalid phase '{value}'. Use one of: {supported_rows}.")
