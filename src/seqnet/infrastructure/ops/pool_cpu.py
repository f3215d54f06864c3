"""
CPU reference max-pooling kernel (NumPy backend).

Pooling is non-overlapping: the stride equals the window size and no padding
is applied. Rows and columns that do not fill a whole window are dropped, so
a (C, H, W) input produces (C, H // w, W // w).
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def pool_output_hw(H: int, W: int, window: int) -> Tuple[int, int]:
    return H // window, W // window


def maxpool_forward_cpu(x: np.ndarray, *, window: int) -> np.ndarray:
    """
    MaxPool forward pass (CPU, NumPy) for a CHW tensor.

    Parameters
    ----------
    x : np.ndarray
        Input tensor of shape (C, H, W).
    window : int
        Side of the square pooling window (also the stride).

    Returns
    -------
    np.ndarray
        Output tensor of shape (C, H // window, W // window).

    Raises
    ------
    ValueError
        If the input is not rank 3, `window < 1`, or the window is larger
        than the input plane.
    """
    if x.ndim != 3:
        raise ValueError(f"max pooling expects a (C, H, W) input, got shape {x.shape}")
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")

    C, H, W = x.shape
    H_out, W_out = pool_output_hw(H, W, window)
    if H_out == 0 or W_out == 0:
        raise ValueError(f"window {window} does not fit input plane {H}x{W}")

    cropped = x[:, : H_out * window, : W_out * window]
    blocks = cropped.reshape(C, H_out, window, W_out, window)
    return blocks.max(axis=(2, 4))
