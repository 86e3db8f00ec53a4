"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import H5FeedConfig
from core.errors import H5FeedConfigError


def test_from_env_reads_random_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should parse the shuffle seed from environment."""
    monkeypatch.setenv("H5FEED_RANDOM_SEED", "1234")

    config = H5FeedConfig.from_env()

    assert config.random_seed == 1234


def test_from_env_defaults_without_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to default seed and log level."""
    monkeypatch.delenv("H5FEED_RANDOM_SEED", raising=False)
    monkeypatch.delenv("H5FEED_LOG_LEVEL", raising=False)

    config = H5FeedConfig.from_env()

    assert (config.random_seed, config.log_level) == (42, "INFO")


def test_from_env_raises_for_invalid_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric random seed."""
    monkeypatch.setenv("H5FEED_RANDOM_SEED", "not-a-number")

    with pytest.raises(H5FeedConfigError):
        H5FeedConfig.from_env()

    assert os.getenv("H5FEED_RANDOM_SEED") == "not-a-number"


def test_from_env_raises_for_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject log levels the logging module does not know."""
    monkeypatch.setenv("H5FEED_LOG_LEVEL", "chatty")

    with pytest.raises(H5FeedConfigError):
        H5FeedConfig.from_env()

    assert True
