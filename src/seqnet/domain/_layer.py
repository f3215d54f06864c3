"""
Layer interface definitions.

This module defines the domain-level contract every layer variant satisfies,
using structural subtyping via `typing.Protocol`.

A layer is a pure transformation stage in a feed-forward network: it maps an
input tensor to an output tensor, and exposes enough static introspection
(shapes, parameter count, multiply count) for the network driver to validate
composition and account for cost without knowing how the layer computes.
"""

from __future__ import annotations

from typing import Any, Protocol, Tuple, runtime_checkable

from ._tags import LayerTag
from .types._tensor import TensorLike


@runtime_checkable
class ILayer(Protocol):
    """
    Domain-level layer interface.

    Implementations are immutable once constructed and exclusively own (or
    share read-only) their parameter tensors.

    Notes
    -----
    - `apply` must be deterministic and free of observable side effects; in
      particular it must not mutate its input.
    - `input_shape` is informational: `apply` itself does not enforce it. The
      network driver compares adjacent shapes before running any layer.
    - `num_muls` is a static cost estimate derived from shapes and kernel
      sizes, not a runtime measurement.
    """

    tag: LayerTag

    def apply(self, x: TensorLike) -> TensorLike:
        """
        Transform an input tensor into an output tensor.

        Parameters
        ----------
        x : TensorLike
            Input tensor of shape `input_shape()`.

        Returns
        -------
        TensorLike
            Output tensor of shape `output_shape()`.
        """
        ...

    def input_shape(self) -> Tuple[int, ...]:
        """Shape this layer expects as input."""
        ...

    def output_shape(self) -> Tuple[int, ...]:
        """Shape `apply` produces for a conforming input."""
        ...

    def name(self) -> str:
        """Stable identifier used in diagnostics."""
        ...

    def num_params(self) -> int:
        """Number of learnable scalar parameters owned by the layer."""
        ...

    def num_muls(self) -> int:
        """Number of multiplications performed by one `apply` call."""
        ...

    def to_record(self) -> Any:
        """
        Return the serializable record sufficient to rebuild this layer.

        Returns
        -------
        Any
            A layer record whose `tag` equals this layer's `tag`.
        """
        ...
