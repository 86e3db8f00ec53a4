"""HDF5 data layer lifecycle.

This module binds the manifest reader, HDF5 loader, permutations,
cursor, and batch assembler into one data-source layer with a
setup / forward / teardown lifecycle.
"""

from __future__ import annotations

import random
from math import prod
from typing import Any, Sequence

from core.errors import H5FeedServeError, H5FeedShapeError
from core.logging_config import get_logger
from core.types import DataLayerConfig, FileBundle
from ingest.hdf5_loader import load_file_bundle
from ingest.manifest_reader import read_manifest
from serve.batch_assembler import BatchAssembler, validate_image_tensor
from serve.cursor import Cursor
from serve.image_transform import DataTransformer, build_data_transformer
from serve.output_tensor import OutputTensor
from serve.permutation import Permutation

_LOGGER = get_logger(__name__)


class HDF5DataLayer:
    """Stream fixed-size batches from the HDF5 files listed in a manifest.

    Args:
        config: Validated layer configuration.
        random_seed: Seed for file and row shuffling.
        transformer: Optional image transformer; when omitted and the image
            transform path is enabled, one is built from ``transform_param``.
    """

    def __init__(
        self,
        config: DataLayerConfig,
        random_seed: int,
        transformer: DataTransformer | None = None,
    ) -> None:
        self._config = config
        self._randomizer = random.Random(random_seed)
        if config.uses_image_transform and transformer is None:
            transformer = build_data_transformer(
                config.transform_param or {}, config.phase, random_seed
            )
        self._transformer = transformer if config.uses_image_transform else None
        self._assembler = BatchAssembler(config.batch_size, self._transformer)
        self._file_paths: tuple[str, ...] = ()
        self._file_permutation = Permutation(self._randomizer)
        self._row_permutation = Permutation(self._randomizer)
        self._cursor = Cursor()
        self._bundle: FileBundle | None = None
        self._row_shapes: tuple[tuple[int, ...], ...] = ()
        self._outputs: tuple[Any, ...] = ()

    @property
    def config(self) -> DataLayerConfig:
        return self._config

    @property
    def num_files(self) -> int:
        return len(self._file_paths)

    @property
    def file_index(self) -> int:
        return self._cursor.file_index

    @property
    def row_index(self) -> int:
        return self._cursor.row_index

    @property
    def outputs(self) -> tuple[Any, ...]:
        return self._outputs

    @property
    def current_path(self) -> str:
        return self._require_bundle().path

    @property
    def file_order(self) -> tuple[int, ...]:
        return self._file_permutation.as_tuple()

    @property
    def row_order(self) -> tuple[int, ...]:
        return self._row_permutation.as_tuple()

    def current_row_source(self) -> tuple[str, int]:
        """Return ``(path, row)`` of the sample the next forward emits first."""
        bundle = self._require_bundle()
        return bundle.path, self._row_permutation[self._cursor.row_index]

    def setup(self, outputs: Sequence[Any] | None = None) -> tuple[Any, ...]:
        """Read the manifest, load the first file, and shape the outputs.

        Args:
            outputs: Framework tensors to reshape, one per top. When omitted,
                the layer allocates ``OutputTensor`` buffers itself.

        Returns:
            The reshaped output tensors in top order.

        Raises:
            H5FeedError: If the manifest, a file, or a dataset is invalid.
        """
        tops = self._config.tops
        if outputs is None:
            outputs = tuple(OutputTensor(self._config.dtype) for _ in tops)
        if len(outputs) != len(tops):
            raise H5FeedShapeError(
                f"Data layer declares {len(tops)} tops but received {len(outputs)} outputs."
            )
        self._file_paths = read_manifest(self._config.source)
        _LOGGER.info("hdf5_layer_setup", source=self._config.source, num_files=self.num_files)
        self._row_shapes = ()
        self._cursor.reset()
        self._file_permutation.identity(self.num_files)
        if self._config.shuffle:
            self._file_permutation.reshuffle()
        bundle = self._load_file(self._file_permutation[0])
        self._row_shapes = tuple(tensor.row_shape for tensor in bundle.tensors)
        for top_index, output in enumerate(outputs):
            output.reshape(self._output_shape(bundle, top_index))
        self._outputs = tuple(outputs)
        _LOGGER.info(
            "hdf5_layer_ready",
            tops=list(tops),
            shapes=[list(self._output_shape(bundle, index)) for index in range(len(tops))],
        )
        return self._outputs

    def forward(self, outputs: Sequence[Any] | None = None) -> tuple[Any, ...]:
        """Fill every output with the next ``batch_size`` samples.

        Args:
            outputs: Output tensors shaped by ``setup``; defaults to the
                tensors returned from ``setup``.

        Returns:
            The filled output tensors.

        Raises:
            H5FeedServeError: If called before ``setup``.
            H5FeedShapeError: If an output does not fit one row per sample slot.
        """
        bundle = self._require_bundle()
        targets = tuple(outputs) if outputs is not None else self._outputs
        if len(targets) != len(self._config.tops):
            raise H5FeedShapeError(
                f"Data layer declares {len(self._config.tops)} tops "
                f"but received {len(targets)} outputs."
            )
        self._check_output_counts(targets)
        for sample_index in range(self._config.batch_size):
            row = self._row_permutation[self._cursor.row_index]
            self._assembler.write_sample(bundle, row, targets, sample_index)
            bundle = self._advance(bundle)
        return targets

    def teardown(self) -> None:
        """Release the loaded bundle and both permutations."""
        self._bundle = None
        self._file_permutation.clear()
        self._row_permutation.clear()
        self._row_shapes = ()
        self._outputs = ()
        self._cursor.reset()
        _LOGGER.debug("hdf5_layer_teardown", source=self._config.source)

    def _advance(self, bundle: FileBundle) -> FileBundle:
        if not self._cursor.advance(bundle.row_count):
            return bundle
        if self.num_files > 1:
            if self._cursor.next_file(self.num_files):
                _LOGGER.debug("hdf5_file_list_wrapped", source=self._config.source)
                if self._config.shuffle:
                    self._file_permutation.reshuffle()
            bundle = self._load_file(self._file_permutation[self._cursor.file_index])
        elif self._config.shuffle:
            self._row_permutation.reshuffle()
        return bundle

    def _load_file(self, file_number: int) -> FileBundle:
        """Replace the current bundle with file ``file_number`` of the manifest."""
        bundle = load_file_bundle(
            self._file_paths[file_number], self._config.tops, self._config.dtype
        )
        if self._config.uses_image_transform:
            validate_image_tensor(bundle[0])
        if self._row_shapes:
            self._check_row_shapes(bundle)
        self._bundle = bundle
        self._row_permutation.identity(bundle.row_count)
        if self._config.shuffle:
            self._row_permutation.reshuffle()
        return bundle

    def _check_output_counts(self, outputs: Sequence[Any]) -> None:
        """Check that every copied output holds one source row per sample slot."""
        batch_size = self._config.batch_size
        for top_index, (output, row_shape) in enumerate(zip(outputs, self._row_shapes)):
            if top_index == 0 and self._transformer is not None:
                continue
            row_size = prod(row_shape)
            if output.count() != batch_size * row_size:
                top_name = self._config.tops[top_index]
                _LOGGER.error(
                    "hdf5_output_count_mismatch",
                    dataset=top_name,
                    expected=batch_size * row_size,
                    actual=output.count(),
                )
                raise H5FeedShapeError(
                    f"Output for top '{top_name}' holds {output.count()} elements, "
                    f"but {batch_size} rows of {row_size} elements need "
                    f"{batch_size * row_size}. Reshape it as setup() did."
                )

    def _check_row_shapes(self, bundle: FileBundle) -> None:
        for tensor, expected in zip(bundle.tensors, self._row_shapes):
            if tensor.row_shape != expected:
                _LOGGER.error(
                    "hdf5_row_shape_mismatch",
                    path=bundle.path,
                    dataset=tensor.name,
                    expected=list(expected),
                    actual=list(tensor.row_shape),
                )
                raise H5FeedShapeError(
                    f"HDF5 dataset '{tensor.name}' in {bundle.path} has rows shaped "
                    f"{tensor.row_shape}, but the outputs were shaped for {expected}. "
                    "All files in the manifest must share per-row shapes."
                )

    def _output_shape(self, bundle: FileBundle, top_index: int) -> tuple[int, ...]:
        tensor = bundle[top_index]
        if top_index == 0 and self._transformer is not None:
            _, _, height, width = tensor.shape
            return (self._config.batch_size, *self._transformer.infer_shape(height, width))
        return (self._config.batch_size, *tensor.row_shape)

    def _require_bundle(self) -> FileBundle:
        if self._bundle is None:
            raise H5FeedServeError(
                "HDF5 data layer has no loaded data. Call setup() before forward()."
            )
        return self._bundle
