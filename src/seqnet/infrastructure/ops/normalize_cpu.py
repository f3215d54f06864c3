"""
CPU reference normalization kernel (NumPy backend).

Standardizes a whole tensor with its own statistics:

    y = (x - mean(x)) / sqrt(var(x) + eps)

Statistics are taken over every element (no per-channel split), which keeps
the layer parameter-free and shape-agnostic.
"""

from __future__ import annotations

import numpy as np

NORMALIZE_EPS = 1e-5


def normalize_forward_cpu(x: np.ndarray, *, eps: float = NORMALIZE_EPS) -> np.ndarray:
    """
    Standardize `x` to zero mean and (near) unit variance.

    Parameters
    ----------
    x : np.ndarray
        Input tensor of any shape.
    eps : float, optional
        Variance floor preventing division by zero on constant inputs.

    Returns
    -------
    np.ndarray
        float32 tensor with the same shape as `x`.
    """
    x32 = np.asarray(x, dtype=np.float32)
    mean = x32.mean(dtype=np.float32)
    centered = x32 - mean
    var = np.mean(centered * centered, dtype=np.float32)
    inv_std = np.float32(1.0) / np.sqrt(var + np.float32(eps))
    return (centered * inv_std).astype(np.float32, copy=False)
