from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from ...domain._tags import LayerTag
from ...domain.model._stateless_mixin import StatelessLayerMixin
from .._layer import Layer, as_shape
from ..factory._layer_factory import register_layer
from ..ops.normalize_cpu import normalize_forward_cpu
from ..records._layer_record import NormalizeRecord


@register_layer()
class Normalize(StatelessLayerMixin, Layer):
    """
    Whole-tensor standardization: `(x - mean) / sqrt(var + eps)`.

    Parameter-free; statistics are computed from each input tensor.
    `num_muls()` counts one square per element for the variance and one
    scaling multiply per element.
    """

    tag = LayerTag.NORMALIZE

    def __init__(self, input_shape: Sequence[int]) -> None:
        self._input_shape = as_shape(input_shape, what="input_shape")

    def apply(self, x: np.ndarray) -> np.ndarray:
        return normalize_forward_cpu(np.asarray(x, dtype=np.float32))

    def input_shape(self) -> Tuple[int, ...]:
        return self._input_shape

    def output_shape(self) -> Tuple[int, ...]:
        return self._input_shape

    def num_muls(self) -> int:
        return 2 * int(np.prod(self._input_shape, dtype=np.int64))

    def to_record(self) -> NormalizeRecord:
        return NormalizeRecord()
