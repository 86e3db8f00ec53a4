"""H5Feed exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure kind of the data-source stage raises a specific error type.
"""

from __future__ import annotations


class H5FeedError(Exception):
    """Base exception for all H5Feed failures."""


class H5FeedConfigError(H5FeedError):
    """Raised for invalid runtime or layer configuration."""


class H5FeedManifestError(H5FeedError):
    """Raised when the file-list manifest cannot be read or is empty."""


class H5FeedFileError(H5FeedError):
    """Raised when a listed HDF5 file cannot be opened."""


class H5FeedDatasetError(H5FeedError):
    """Raised when a declared dataset is missing or malformed."""


class H5FeedRowCountError(H5FeedError):
    """Raised when datasets in one file disagree on their row count."""


class H5FeedShapeError(H5FeedError):
    """Raised when loaded rows do not fit the configured output tensors."""


class H5FeedCloseError(H5FeedError):
    """Raised when an HDF5 file fails to close cleanly."""


class H5FeedServeError(H5FeedError):
    """Raised for data layer lifecycle misuse."""


class H5FeedDependencyError(H5FeedError):
    """Raised when an optional runtime dependency is missing."""
