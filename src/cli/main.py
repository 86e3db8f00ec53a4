"""H5Feed CLI entry points.
This module exposes commands to inspect and dry-run HDF5 data layers.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

from core.config import H5FeedConfig
from core.constants import DEFAULT_STREAM_BATCHES
from core.errors import H5FeedError
from core.layer_config import load_layer_config
from core.logging_config import configure_logging
from serve.hdf5_data_layer import HDF5DataLayer


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="h5feed", description="HDF5 batch data source CLI")
    parser.add_argument("--seed", type=int, help="Override H5FEED_RANDOM_SEED for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_inspect_command(subparsers)
    _add_stream_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the H5Feed CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        layer = _build_layer(args)
        if args.command == "inspect":
            return _run_inspect_command(layer)
        if args.command == "stream":
            return _run_stream_command(layer, args)
    except H5FeedError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_layer(args: argparse.Namespace) -> HDF5DataLayer:
    """Build a data layer from the config file and runtime seed.

    Args:
        args: Parsed CLI args.

    Returns:
        Unconfigured data layer.
    """
    config = H5FeedConfig.from_env()
    configure_logging(config.log_level)
    random_seed = config.random_seed if args.seed is None else args.seed
    return HDF5DataLayer(load_layer_config(args.config), random_seed)


def _run_inspect_command(layer: HDF5DataLayer) -> int:
    """Handle inspect command.

    Args:
        layer: Data layer to set up.

    Returns:
        Exit code.
    """
    outputs = layer.setup()
    print(f"source={layer.config.source}")
    print(f"num_files={layer.num_files}")
    first_path, first_row = layer.current_row_source()
    print(f"first_file={first_path}")
    print(f"first_row={first_row}")
    for top_name, output in zip(layer.config.tops, outputs):
        print(f"{top_name}\t{list(output.shape_tuple)}\t{output.dtype.name}")
    layer.teardown()
    return 0


def _run_stream_command(layer: HDF5DataLayer, args: argparse.Namespace) -> int:
    """Handle stream command.

    Args:
        layer: Data layer to set up and run.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    layer.setup()
    for batch_index in range(args.batches):
        outputs = layer.forward()
        print(json.dumps(_summarize_batch(batch_index, layer.config.tops, outputs)))
    layer.teardown()
    return 0


def _summarize_batch(
    batch_index: int,
    tops: Sequence[str],
    outputs: Sequence[Any],
) -> dict[str, object]:
    """Build per-output shape and value statistics for one batch."""
    summary: dict[str, object] = {"batch": batch_index}
    for top_name, output in zip(tops, outputs):
        values = output.as_array()
        summary[top_name] = {
            "shape": list(output.shape_tuple),
            "min": float(values.min()),
            "max": float(values.max()),
            "mean": float(values.mean()),
        }
    return summary


def _add_inspect_command(subparsers: Any) -> None:
    """Register inspect subcommand."""
    parser = subparsers.add_parser("inspect", help="Set up a layer and print output shapes")
    parser.add_argument("config", help="YAML layer config file")


def _add_stream_command(subparsers: Any) -> None:
    """Register stream subcommand."""
    parser = subparsers.add_parser("stream", help="Run forwards and print batch statistics")
    parser.add_argument("config", help="YAML layer config file")
    parser.add_argument(
        "--batches",
        type=int,
        default=DEFAULT_STREAM_BATCHES,
        help="Number of forward calls to run",
    )
