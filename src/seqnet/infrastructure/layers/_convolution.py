"""
Convolution layer.

`Convolution` owns a bank of K two-dimensional filters (a (K, kh, kw) kernel
tensor) and applies them to a single (C, H, W) feature map with a valid,
stride-1 cross-correlation. The numeric work is delegated to
`ops.conv_cpu.convolution_forward_cpu`.

Shape semantics
---------------
Input:
    (C, H, W)

Output:
    (K, H - kh + 1, W - kw + 1)

Weight sharing
--------------
The kernel is held as a read-only view. Building two layers from the same
float32 array (or rebuilding a layer from its own record) shares storage
instead of copying it.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import numpy as np

from ...domain._tags import LayerTag
from .._layer import Layer, as_shape, readonly_parameter
from ..factory._layer_factory import register_layer
from ..ops.conv_cpu import conv_output_hw, convolution_forward_cpu, convolution_num_muls
from ..records._layer_record import ConvolutionRecord


@register_layer()
class Convolution(Layer):
    """
    Multi-filter 2D convolution over a CHW tensor.

    Parameters
    ----------
    kernel : array-like
        Filter bank of shape (K, kh, kw).
    input_shape : Sequence[int]
        Shape (C, H, W) of the tensors this layer receives.

    Raises
    ------
    ValueError
        If the kernel is not 3-dimensional, `input_shape` is not a valid
        rank-3 shape, or a filter is larger than the input plane.
    """

    tag = LayerTag.CONVOLUTION

    def __init__(self, kernel: Any, input_shape: Sequence[int]) -> None:
        self._kernel = readonly_parameter(kernel, ndim=3, what="kernel")
        self._input_shape = as_shape(input_shape, what="input_shape")
        if len(self._input_shape) != 3:
            raise ValueError(
                f"Convolution expects a (C, H, W) input_shape, got {self._input_shape}"
            )

        _, H, W = self._input_shape
        K, kh, kw = self._kernel.shape
        H_out, W_out = conv_output_hw(H, W, kh, kw)
        if H_out <= 0 or W_out <= 0:
            raise ValueError(f"kernel {kh}x{kw} does not fit input plane {H}x{W}")
        self._output_shape: Tuple[int, ...] = (int(K), H_out, W_out)

    @property
    def kernel(self) -> np.ndarray:
        return self._kernel

    def apply(self, x: np.ndarray) -> np.ndarray:
        return convolution_forward_cpu(np.asarray(x, dtype=np.float32), self._kernel)

    def input_shape(self) -> Tuple[int, ...]:
        return self._input_shape

    def output_shape(self) -> Tuple[int, ...]:
        return self._output_shape

    def num_params(self) -> int:
        return int(self._kernel.size)

    def num_muls(self) -> int:
        return convolution_num_muls(self._input_shape, self._kernel.shape)  # type: ignore[arg-type]

    def to_record(self) -> ConvolutionRecord:
        return ConvolutionRecord(kernel=self._kernel)

    @classmethod
    def from_record(
        cls, record: ConvolutionRecord, input_shape: Optional[Sequence[int]]
    ) -> "Convolution":
        if input_shape is None:
            raise ValueError("Convolution requires an input_shape to be built")
        return cls(kernel=record.kernel, input_shape=input_shape)
