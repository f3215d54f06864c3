"""
Max-pooling layer.

`MaxPool` downsamples each channel of a (C, H, W) tensor by taking the
maximum over non-overlapping `window x window` blocks. It owns only its
window size; the reduction lives in `ops.pool_cpu`.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from ...domain._tags import LayerTag
from .._layer import Layer, as_shape
from ..factory._layer_factory import register_layer
from ..ops.pool_cpu import maxpool_forward_cpu, pool_output_hw
from ..records._layer_record import MaxPoolRecord


@register_layer()
class MaxPool(Layer):
    """
    Non-overlapping 2D max pooling.

    Parameters
    ----------
    window : int
        Pooling window side, also used as the stride.
    input_shape : Sequence[int]
        Shape (C, H, W) of the tensors this layer receives.

    Notes
    -----
    Trailing rows/columns that do not fill a whole window are dropped, so
    the output shape is (C, H // window, W // window). Pooling performs
    comparisons only, hence `num_muls() == 0`.
    """

    tag = LayerTag.MAX_POOL

    def __init__(self, window: int, input_shape: Sequence[int]) -> None:
        if isinstance(window, bool) or not isinstance(window, (int, np.integer)):
            raise ValueError(f"window must be an integer, got {window!r}")
        if int(window) < 1:
            raise ValueError(f"window must be >= 1, got {window}")
        self._window = int(window)

        self._input_shape = as_shape(input_shape, what="input_shape")
        if len(self._input_shape) != 3:
            raise ValueError(
                f"MaxPool expects a (C, H, W) input_shape, got {self._input_shape}"
            )

        C, H, W = self._input_shape
        H_out, W_out = pool_output_hw(H, W, self._window)
        if H_out == 0 or W_out == 0:
            raise ValueError(f"window {self._window} does not fit input plane {H}x{W}")
        self._output_shape: Tuple[int, ...] = (C, H_out, W_out)

    @property
    def window(self) -> int:
        return self._window

    def apply(self, x: np.ndarray) -> np.ndarray:
        return maxpool_forward_cpu(np.asarray(x, dtype=np.float32), window=self._window)

    def input_shape(self) -> Tuple[int, ...]:
        return self._input_shape

    def output_shape(self) -> Tuple[int, ...]:
        return self._output_shape

    def to_record(self) -> MaxPoolRecord:
        return MaxPoolRecord(window=self._window)

    @classmethod
    def from_record(
        cls, record: MaxPoolRecord, input_shape: Optional[Sequence[int]]
    ) -> "MaxPool":
        if input_shape is None:
            raise ValueError("MaxPool requires an input_shape to be built")
        return cls(window=record.window, input_shape=input_shape)
