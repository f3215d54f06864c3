from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from ...domain._tags import LayerTag
from ...domain.model._stateless_mixin import StatelessLayerMixin
from .._layer import Layer, as_shape
from ..factory._layer_factory import register_layer
from ..records._layer_record import ReluRecord


@register_layer()
class Relu(StatelessLayerMixin, Layer):
    """
    Rectified linear unit: elementwise `max(x, 0)`.

    Shape-preserving and parameter-free. Works on tensors of any rank.
    """

    tag = LayerTag.RELU

    def __init__(self, input_shape: Sequence[int]) -> None:
        self._input_shape = as_shape(input_shape, what="input_shape")

    def apply(self, x: np.ndarray) -> np.ndarray:
        return np.maximum(np.asarray(x, dtype=np.float32), np.float32(0.0))

    def input_shape(self) -> Tuple[int, ...]:
        return self._input_shape

    def output_shape(self) -> Tuple[int, ...]:
        return self._input_shape

    def to_record(self) -> ReluRecord:
        return ReluRecord()
