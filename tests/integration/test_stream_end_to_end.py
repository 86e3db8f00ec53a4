"""Integration test streaming a shuffled multi-file dataset through the CLI."""

from __future__ import annotations

import json
from pathlib import Path

import h5py
import numpy as np

from cli.main import main


def test_shuffled_stream_covers_every_row_each_epoch(tmp_path: Path, capsys) -> None:
    """A shuffled multi-file stream should visit every row once per epoch."""
    file_paths = []
    for file_index, row_count in enumerate((3, 5, 4)):
        file_path = tmp_path / f"part-{file_index}.h5"
        values = np.arange(row_count) + 100 * file_index
        with h5py.File(file_path, "w") as h5_file:
            h5_file.create_dataset("data", data=values.reshape(row_count, 1))
            h5_file.create_dataset("label", data=values)
        file_paths.append(str(file_path))
    manifest = tmp_path / "train.txt"
    manifest.write_text(" ".join(file_paths), encoding="utf-8")
    config_path = tmp_path / "layer.yaml"
    config_path.write_text(
        f"source: {manifest}\nbatch_size: 1\ntops: [data, label]\nshuffle: true\n",
        encoding="utf-8",
    )

    exit_code = main(["--seed", "17", "stream", str(config_path), "--batches", "24"])
    summaries = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]

    emitted = [summary["data"]["min"] for summary in summaries]
    expected = sorted([0, 1, 2, 100, 101, 102, 103, 104, 200, 201, 202, 203])
    assert exit_code == 0
    assert sorted(emitted[:12]) == expected and sorted(emitted[12:]) == expected
    assert all(summary["data"]["min"] == summary["label"]["min"] for summary in summaries)
