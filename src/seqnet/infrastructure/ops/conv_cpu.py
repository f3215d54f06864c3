"""
CPU reference convolution kernel (NumPy backend).

This module provides the forward computation behind the `Convolution` layer
for single, unbatched tensors in **CHW** layout.

Semantics
---------
- Valid (unpadded), stride-1 cross-correlation.
- The kernel has shape (K, kh, kw): K filters, each a 2D window.
- Every filter is slid over every input channel and the per-channel responses
  are summed, so output channel k is

      y[k, i, j] = sum_c sum_{u,v} x[c, i + u, j + v] * kernel[k, u, v]

Design notes
------------
- Loops run over kernel offsets only; each offset contributes a vectorized
  multiply-accumulate over the whole output plane.
- Accumulation is done in float32 to keep results bit-stable across runs.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def conv_output_hw(H: int, W: int, kh: int, kw: int) -> Tuple[int, int]:
    """
    Compute output spatial dimensions for a valid, stride-1 convolution.

    Returns
    -------
    tuple[int, int]
        (H_out, W_out); non-positive values mean the kernel does not fit.
    """
    return H - kh + 1, W - kw + 1


def convolution_forward_cpu(x: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Naive convolution forward pass (CPU, NumPy) for a CHW tensor.

    Parameters
    ----------
    x : np.ndarray
        Input tensor of shape (C, H, W).
    kernel : np.ndarray
        Filter bank of shape (K, kh, kw).

    Returns
    -------
    np.ndarray
        Output tensor of shape (K, H - kh + 1, W - kw + 1), float32.

    Raises
    ------
    ValueError
        If ranks are wrong or the kernel is larger than the input plane.
    """
    if x.ndim != 3:
        raise ValueError(f"convolution expects a (C, H, W) input, got shape {x.shape}")
    if kernel.ndim != 3:
        raise ValueError(f"kernel must have shape (K, kh, kw), got {kernel.shape}")

    _, H, W = x.shape
    K, kh, kw = kernel.shape
    H_out, W_out = conv_output_hw(H, W, kh, kw)
    if H_out <= 0 or W_out <= 0:
        raise ValueError(
            f"kernel {kh}x{kw} does not fit input plane {H}x{W}"
        )

    # Channel sum first: every filter sees the same summed plane.
    plane = x.sum(axis=0, dtype=np.float32)

    y = np.zeros((K, H_out, W_out), dtype=np.float32)
    for u in range(kh):
        for v in range(kw):
            window = plane[u : u + H_out, v : v + W_out]
            y += kernel[:, u, v].reshape(K, 1, 1) * window[None, :, :]
    return y


def convolution_num_muls(
    input_shape: Tuple[int, int, int], kernel_shape: Tuple[int, int, int]
) -> int:
    """
    Count the multiplications performed by `convolution_forward_cpu`.

    Channels are summed before any filter is applied, so the input channel
    count only adds additions: the cost is ``K * H_out * W_out * kh * kw``.
    """
    _, H, W = input_shape
    K, kh, kw = kernel_shape
    H_out, W_out = conv_output_hw(H, W, kh, kw)
    return int(K * H_out * W_out * kh * kw)
