from __future__ import annotations

import base64
from typing import Any, Dict

import numpy as np


def bytes_to_b64_str(b: bytes) -> str:
    """
    Encode raw bytes into a base64 ASCII string (JSON-safe).
    """
    return base64.b64encode(b).decode("ascii")


def b64_str_to_bytes(s: str) -> bytes:
    """
    Decode a base64 ASCII string back into raw bytes.
    """
    return base64.b64decode(s.encode("ascii"))


def ndarray_to_payload(arr: np.ndarray) -> Dict[str, Any]:
    """
    Serialize a NumPy ndarray into a JSON-safe payload.

    Returns
    -------
    dict
        {
          "b64": "<base64>",
          "dtype": "<numpy dtype str>",
          "shape": [...],
          "order": "C"
        }
    """
    a = np.asarray(arr)
    return {
        "b64": bytes_to_b64_str(a.tobytes(order="C")),
        "dtype": a.dtype.str,  # e.g. "<f4"
        "shape": [int(d) for d in a.shape],
        "order": "C",
    }


def payload_to_ndarray(payload: Dict[str, Any]) -> np.ndarray:
    """
    Deserialize a JSON payload back into a NumPy ndarray.

    Notes
    -----
    The buffer is validated against the declared shape before reshaping, and
    the result is an owning, C-contiguous copy.
    """
    if str(payload.get("order", "C")) != "C":
        raise ValueError(f"Unsupported payload order: {payload.get('order')!r}")

    b = b64_str_to_bytes(str(payload["b64"]))
    dtype = np.dtype(str(payload["dtype"]))
    shape = tuple(int(x) for x in payload["shape"])

    arr = np.frombuffer(b, dtype=dtype)
    expected = int(np.prod(shape, dtype=np.int64))
    if arr.size != expected:
        raise ValueError(
            f"Payload holds {arr.size} elements, but shape {shape} needs {expected}."
        )

    return np.array(arr.reshape(shape), copy=True, order="C")


def tensor_from_node(node: Any) -> np.ndarray:
    """
    Decode a serialized tensor field.

    Accepts either a base64 payload produced by `ndarray_to_payload` or a
    plain (nested) list of numbers, as hand-written network files use.

    Returns
    -------
    np.ndarray
        float32 array.
    """
    if isinstance(node, dict):
        arr = payload_to_ndarray(node)
    else:
        arr = np.asarray(node)
        if arr.dtype == object:
            raise ValueError("Ragged nested lists cannot be decoded as a tensor.")
    return arr.astype(np.float32, copy=False)
