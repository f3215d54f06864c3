"""
Flatten layer.

`Flatten` collapses every dimension of its input into a single feature
dimension, in C order. It is typically used to connect convolution/pooling
feature maps to a `FullyConnected` layer.

Shape semantics
---------------
Input:
    (d1, d2, ..., dk)

Output:
    (d1 * d2 * ... * dk,)

Inputs are unbatched, so unlike batched frameworks no leading dimension is
preserved.
"""

from __future__ import annotations

from math import prod
from typing import Sequence, Tuple

import numpy as np

from ...domain._tags import LayerTag
from ...domain.model._stateless_mixin import StatelessLayerMixin
from .._layer import Layer, as_shape
from ..factory._layer_factory import register_layer
from ..records._layer_record import FlattenRecord


@register_layer()
class Flatten(StatelessLayerMixin, Layer):
    """
    Flatten layer.

    Notes
    -----
    - This operation is a pure reshape (no numerical transformation).
    - The result is a fresh array, never a view of the input.
    """

    tag = LayerTag.FLATTEN

    def __init__(self, input_shape: Sequence[int]) -> None:
        self._input_shape = as_shape(input_shape, what="input_shape")
        self._output_shape: Tuple[int, ...] = (int(prod(self._input_shape)),)

    def apply(self, x: np.ndarray) -> np.ndarray:
        return np.array(x, dtype=np.float32, copy=True).reshape(-1)

    def input_shape(self) -> Tuple[int, ...]:
        return self._input_shape

    def output_shape(self) -> Tuple[int, ...]:
        return self._output_shape

    def to_record(self) -> FlattenRecord:
        return FlattenRecord()
