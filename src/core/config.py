"""Runtime configuration model for H5Feed.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os

from core.constants import DEFAULT_LOG_LEVEL, DEFAULT_RANDOM_SEED
from core.errors import H5FeedConfigError


@dataclass(frozen=True)
class H5FeedConfig:
    """Validated runtime configuration.

    Attributes:
        random_seed: Seed used for deterministic file and row shuffling.
        log_level: Minimum level name for emitted log events.
    """

    random_seed: int
    log_level: str

    @classmethod
    def from_env(cls) -> "H5FeedConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            H5FeedConfigError: If environment values are invalid.
        """
        random_seed_value = os.getenv("H5FEED_RANDOM_SEED", str(DEFAULT_RANDOM_SEED))
        log_level_value = os.getenv("H5FEED_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            random_seed=_parse_random_seed(random_seed_value),
            log_level=_parse_log_level(log_level_value),
        )


def _parse_random_seed(raw_value: str) -> int:
    """Parse the random seed environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed integer seed.

    Raises:
        H5FeedConfigError: If value cannot be parsed into int.
    """
    try:
        return int(raw_value)
    except ValueError as error:
        raise H5FeedConfigError(
            "Invalid H5FEED_RANDOM_SEED value: "
            f"expected integer, got '{raw_value}'. "
            "Set H5FEED_RANDOM_SEED to a numeric value."
        ) from error


def _parse_log_level(raw_value: str) -> str:
    """Normalize and validate the log level environment value."""
    level_name = raw_value.strip().upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise H5FeedConfigError(
            f"Invalid H5FEED_LOG_LEVEL value '{raw_value}'. "
            "Use one of: DEBUG, INFO, WARNING, ERROR."
        )
    return level_name
