"""
Fully connected (dense) layer.

`FullyConnected` maps a feature vector of length `in_features` to one of
length `out_features`:

    y = W @ x + b

where `W` has shape (out_features, in_features) and `b` has shape
(out_features,). Both tensors are held as read-only views and are passed
through unchanged when the layer is converted to and from its record.

Inputs must be 1D; place a `Flatten` layer in front of it to consume
spatial feature maps.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import numpy as np

from ...domain._tags import LayerTag
from .._layer import Layer, readonly_parameter
from ..factory._layer_factory import register_layer
from ..records._layer_record import FullyConnectedRecord


@register_layer()
class FullyConnected(Layer):
    """
    Affine layer over a 1D feature vector.

    Parameters
    ----------
    weights : array-like
        Weight matrix of shape (out_features, in_features).
    biases : array-like
        Bias vector of shape (out_features,).

    Raises
    ------
    ValueError
        If the tensors have the wrong rank or disagree on `out_features`.
    """

    tag = LayerTag.FULLY_CONNECTED

    def __init__(self, weights: Any, biases: Any) -> None:
        self._weights = readonly_parameter(weights, ndim=2, what="weights")
        self._biases = readonly_parameter(biases, ndim=1, what="biases")

        out_features, _ = self._weights.shape
        if self._biases.shape[0] != out_features:
            raise ValueError(
                f"biases length {self._biases.shape[0]} does not match "
                f"out_features {out_features}"
            )

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def biases(self) -> np.ndarray:
        return self._biases

    @property
    def in_features(self) -> int:
        return int(self._weights.shape[1])

    @property
    def out_features(self) -> int:
        return int(self._weights.shape[0])

    def apply(self, x: np.ndarray) -> np.ndarray:
        x32 = np.asarray(x, dtype=np.float32)
        if x32.shape != (self.in_features,):
            raise ValueError(
                f"FullyConnected expects input of shape ({self.in_features},), got {x32.shape}"
            )
        return (self._weights @ x32 + self._biases).astype(np.float32, copy=False)

    def input_shape(self) -> Tuple[int, ...]:
        return (self.in_features,)

    def output_shape(self) -> Tuple[int, ...]:
        return (self.out_features,)

    def num_params(self) -> int:
        return int(self._weights.size + self._biases.size)

    def num_muls(self) -> int:
        return int(self._weights.size)

    def to_record(self) -> FullyConnectedRecord:
        return FullyConnectedRecord(weights=self._weights, biases=self._biases)

    @classmethod
    def from_record(
        cls, record: FullyConnectedRecord, input_shape: Optional[Sequence[int]] = None
    ) -> "FullyConnected":
        """
        Rebuild the layer from its record, using the recorded parameters.

        `input_shape` is accepted for interface uniformity and ignored: the
        weight matrix fixes the input shape. A disagreement with the previous
        layer is reported by `Network.validate()`.
        """
        _ = input_shape
        return cls(weights=record.weights, biases=record.biases)
