"""
Sequential network and forward-pass driver.

This module defines `Network`, an ordered container of layers that evaluates
them as a straight-line fold:

    y = L_n(...L_2(L_1(x)))

There is no branching, no skip connection and no layer reuse: the
composition order is exactly the insertion order.

Execution contract
------------------
- Only rank-3 inputs are accepted; any other rank fails with
  `UnsupportedRankError` before a single layer runs.
- Shapes are validated up front: the input against the first layer, then
  each adjacent pair of layers. A disagreement fails with
  `ShapeMismatchError` before a single layer runs.
- The input is copied into a working value; it is never mutated.
- After each layer, its `LayerReport` is handed to the diagnostics sink, if
  one was injected. Nothing is printed.

Persistence
-----------
`to_record()` / `from_record()` convert between a live network and its
`NetworkRecord`. Reconstruction is all-or-nothing: any per-layer failure
raises `NetworkDeserializationError` and no partial network is returned.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ...domain._errors import (
    NetworkDeserializationError,
    ShapeMismatchError,
    UnsupportedRankError,
)
from ...domain._tags import LayerTag
from .._layer import Layer
from ..factory._layer_factory import LayerFactory
from ..records._network_record import NetworkRecord
from ._diagnostics import DiagnosticsSink, LayerReport, format_layer_row

from .. import layers as _layers  # noqa: F401  (registers layer kinds)

logger = logging.getLogger(__name__)

SUPPORTED_RANK = 3


class Network:
    """
    Ordered, owned sequence of layers with a single forward-pass entry point.

    Parameters
    ----------
    *layers : Layer
        Zero or more layers, in forward order.
    sink : Optional[DiagnosticsSink], optional
        Default diagnostics sink used by `apply` when no per-call sink is
        given. If None, reports are discarded.

    Notes
    -----
    - `add_layer` performs no shape validation; call `validate()` to check a
      network explicitly. `apply` always validates before computing.
    - Layers are never mutated by the network.
    """

    def __init__(self, *layers: Layer, sink: Optional[DiagnosticsSink] = None) -> None:
        self._layers: List[Layer] = []
        self._sink = sink
        for layer in layers:
            self.add_layer(layer)

    def add_layer(self, layer: Layer) -> None:
        """
        Append a layer to the end of the forward order.

        Raises
        ------
        TypeError
            If `layer` is not a `Layer`.
        """
        if not isinstance(layer, Layer):
            raise TypeError(f"Network.add_layer expects a Layer, got: {type(layer)}")
        self._layers.append(layer)

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def __getitem__(self, idx: int) -> Layer:
        return self._layers[idx]

    def layers(self) -> Tuple[Layer, ...]:
        return tuple(self._layers)

    def tags(self) -> Tuple[LayerTag, ...]:
        """Return the parameter-free manifest of layer kinds, in order."""
        return tuple(layer.tag for layer in self._layers)

    def input_shape(self) -> Optional[Tuple[int, ...]]:
        """Shape accepted by the first layer, or None for an empty network."""
        return self._layers[0].input_shape() if self._layers else None

    def output_shape(self) -> Optional[Tuple[int, ...]]:
        return self._layers[-1].output_shape() if self._layers else None

    def num_params(self) -> int:
        return sum(layer.num_params() for layer in self._layers)

    def num_muls(self) -> int:
        return sum(layer.num_muls() for layer in self._layers)

    def reports(self) -> Tuple[LayerReport, ...]:
        return tuple(layer.report() for layer in self._layers)

    def validate(self, input_shape: Optional[Sequence[int]] = None) -> None:
        """
        Check that consecutive layers agree on shapes.

        Parameters
        ----------
        input_shape : Optional[Sequence[int]], optional
            If given, also check it against the first layer's input shape.

        Raises
        ------
        ShapeMismatchError
            At the first layer whose declared input shape differs from what it
            would receive.
        """
        if not self._layers:
            return

        if input_shape is not None:
            actual = tuple(int(d) for d in input_shape)
            expected = self._layers[0].input_shape()
            if actual != expected:
                raise ShapeMismatchError(0, expected, actual)

        for i in range(1, len(self._layers)):
            produced = self._layers[i - 1].output_shape()
            expected = self._layers[i].input_shape()
            if produced != expected:
                raise ShapeMismatchError(i, expected, produced)

    def apply(
        self,
        x: np.ndarray,
        rank: Optional[int] = None,
        *,
        sink: Optional[DiagnosticsSink] = None,
    ) -> np.ndarray:
        """
        Run the forward pass.

        Parameters
        ----------
        x : np.ndarray
            Input tensor.
        rank : Optional[int], optional
            Declared rank of `x`. Defaults to `x.ndim`; a declared rank that
            differs from the actual one is rejected rather than reinterpreted.
        sink : Optional[DiagnosticsSink], optional
            Per-call diagnostics sink, overriding the network's default.

        Returns
        -------
        np.ndarray
            Output of the last layer (float32). An empty network returns a
            copy of `x` with its dtype unchanged.

        Raises
        ------
        UnsupportedRankError
            If the rank is not `SUPPORTED_RANK`.
        ShapeMismatchError
            If the input or any adjacent pair of layers disagree on shapes.
        """
        arr = np.asarray(x)
        requested = arr.ndim if rank is None else int(rank)
        if requested != SUPPORTED_RANK:
            raise UnsupportedRankError(requested, SUPPORTED_RANK)
        if arr.ndim != requested:
            raise UnsupportedRankError(arr.ndim, SUPPORTED_RANK)

        self.validate(arr.shape)

        if not self._layers:
            return arr.copy()

        emit = sink if sink is not None else self._sink

        out = np.array(arr, dtype=np.float32, copy=True)
        for layer in self._layers:
            out = layer.apply(out)
            if emit is not None:
                emit(layer.report())
        return out

    def __call__(self, x: np.ndarray, rank: Optional[int] = None) -> np.ndarray:
        return self.apply(x, rank)

    def summary(self) -> str:
        """
        Render a fixed-width table of every layer plus totals.

        Returns
        -------
        str
            One header line, one `format_layer_row` line per layer, and the
            parameter/multiply totals.
        """
        lines = [
            f"{self.__class__.__name__}(input_shape={self.input_shape()})",
            f"{'layer':<20} | {'output shape':<10} | {'params':<5} | {'muls':<5}",
        ]
        lines.extend(format_layer_row(r) for r in self.reports())
        lines.append(f"total params: {self.num_params()}")
        lines.append(f"total muls: {self.num_muls()}")
        return "\n".join(lines)

    def to_record(self) -> NetworkRecord:
        """
        Convert the network into its persistable record, preserving order.

        Raises
        ------
        ShapeMismatchError
            If adjacent layers disagree on shapes. Only the first layer's
            input shape is recorded, so a mismatched network cannot be
            persisted faithfully.
        """
        self.validate()
        return NetworkRecord(
            layers=tuple(LayerFactory.to_record(layer) for layer in self._layers),
            input_shape=self.input_shape(),
        )

    @classmethod
    def from_record(
        cls, record: NetworkRecord, *, sink: Optional[DiagnosticsSink] = None
    ) -> "Network":
        """
        Build a network from its record.

        The record's `input_shape` is threaded through the layers: each built
        layer's output shape becomes the next layer's build-time input shape.

        Raises
        ------
        NetworkDeserializationError
            If the record is malformed or any layer fails to build. The
            per-layer error is chained as `__cause__`.
        """
        if not isinstance(record, NetworkRecord):
            raise NetworkDeserializationError(
                f"expected a NetworkRecord, got {type(record).__name__}"
            )
        if record.layers and record.input_shape is None:
            raise NetworkDeserializationError(
                "a non-empty network record must carry an input_shape"
            )

        shape = record.input_shape
        built: List[Layer] = []
        for i, layer_record in enumerate(record.layers):
            try:
                layer = LayerFactory.build(layer_record, shape)
            except (TypeError, ValueError) as e:
                raise NetworkDeserializationError(str(e), index=i) from e
            built.append(layer)
            shape = layer.output_shape()

        network = cls(*built, sink=sink)
        try:
            network.validate()
        except ShapeMismatchError as e:
            raise NetworkDeserializationError(str(e), index=e.index) from e

        logger.debug("rebuilt network with %d layers", len(built))
        return network

    def __repr__(self) -> str:
        kinds = ", ".join(t.value for t in self.tags())
        return f"{self.__class__.__name__}([{kinds}])"
