"""
Infrastructure layer base class.

This module provides `Layer`, the concrete base class behind the domain-level
`ILayer` protocol. It implements the conveniences shared by every layer
variant:

- shape normalization and read-only parameter storage helpers
- `name()` derived from the layer's `tag`
- `report()` producing the diagnostics record consumed by the network driver
- `__call__` forwarding to `apply`

Record conversion (`to_record`) and the computation itself (`apply`) are
abstract: a concrete layer that forgets either cannot be instantiated.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Sequence, Tuple

import numpy as np

from ..domain._layer import ILayer
from ..domain._tags import LayerTag
from .network._diagnostics import LayerReport


def as_shape(shape: Sequence[int], *, what: str = "shape") -> Tuple[int, ...]:
    """
    Normalize a shape-like sequence into a tuple of positive Python ints.

    Raises
    ------
    ValueError
        If any dimension is not a positive integer.
    """
    try:
        dims = tuple(shape)
    except TypeError as e:
        raise ValueError(f"{what} must be a sequence of ints, got {shape!r}") from e

    out = []
    for d in dims:
        if isinstance(d, bool) or not isinstance(d, (int, np.integer)):
            raise ValueError(f"{what} must contain ints, got {shape!r}")
        if int(d) <= 0:
            raise ValueError(f"{what} dimensions must be positive, got {shape!r}")
        out.append(int(d))
    return tuple(out)


def readonly_parameter(value: Any, *, ndim: int, what: str) -> np.ndarray:
    """
    Wrap a parameter tensor as a read-only float32 view.

    When `value` is already a float32 ndarray no copy is made, so several
    layers built from the same array share its storage.

    Raises
    ------
    ValueError
        If the tensor rank is not `ndim` or the tensor is empty.
    """
    arr = np.asarray(value, dtype=np.float32)
    if arr.ndim != ndim:
        raise ValueError(f"{what} must be {ndim}-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        raise ValueError(f"{what} must not be empty")

    view = arr.view()
    view.flags.writeable = False
    return view


class Layer(ILayer, ABC):
    """
    Base class for feed-forward layers.

    Subclasses set the class attribute `tag` and implement `apply`,
    `input_shape`, `output_shape` and `to_record`. Stateless layers inherit
    the zero defaults of `num_params` and `num_muls`.
    """

    tag: ClassVar[LayerTag]

    @abstractmethod
    def apply(self, x: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    @abstractmethod
    def input_shape(self) -> Tuple[int, ...]:
        raise NotImplementedError

    @abstractmethod
    def output_shape(self) -> Tuple[int, ...]:
        raise NotImplementedError

    @abstractmethod
    def to_record(self) -> Any:
        raise NotImplementedError

    def name(self) -> str:
        return self.tag.value

    def num_params(self) -> int:
        return 0

    def num_muls(self) -> int:
        return 0

    def report(self) -> LayerReport:
        """
        Return the diagnostics record for this layer.

        Returns
        -------
        LayerReport
            `{name, output_shape, num_params, num_muls}`.
        """
        return LayerReport(
            name=self.name(),
            output_shape=self.output_shape(),
            num_params=self.num_params(),
            num_muls=self.num_muls(),
        )

    def __call__(self, x: np.ndarray) -> np.ndarray:
        return self.apply(x)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(input_shape={self.input_shape()}, "
            f"output_shape={self.output_shape()})"
        )
