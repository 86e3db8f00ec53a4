"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def write_h5(tmp_path: Path) -> Callable[..., str]:
    """Return a factory writing named numpy datasets into an HDF5 file."""
    import h5py
    import numpy as np

    def _write(file_name: str, **datasets: object) -> str:
        file_path = tmp_path / file_name
        with h5py.File(file_path, "w") as h5_file:
            for name, values in datasets.items():
                h5_file.create_dataset(name, data=np.asarray(values))
        return str(file_path)

    return _write


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., str]:
    """Return a factory writing a manifest that lists the given paths."""

    def _write(*paths: str, file_name: str = "manifest.txt") -> str:
        manifest_path = tmp_path / file_name
        manifest_path.write_text("\n".join(paths) + "\n", encoding="utf-8")
        return str(manifest_path)

    return _write


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Restore the default log level after each test."""
    yield
    from core.logging_config import configure_logging

    configure_logging()
