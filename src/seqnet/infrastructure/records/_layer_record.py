"""
Serializable layer records.

A layer record is the minimal reconstruction data for one layer: exactly the
fields a layer variant needs to be rebuilt with bit-identical behavior, and
nothing else. Records are separate from live `Layer` objects; the execution
path never touches them.

Dict form
---------
Each record serializes to a flat dict with a `type` discriminator:

    {"type": "convolution", "kernel": <tensor>}
    {"type": "max_pool", "window": 2}
    {"type": "fully_connected", "weights": <tensor>, "biases": <tensor>}
    {"type": "relu"} / {"type": "flatten"} / {"type": "normalize"}

Tensors are written as base64 payloads (see `encoding._b64`); plain nested
lists are accepted when reading.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Type, Union

import numpy as np

from ...domain._errors import UnknownLayerKindError
from ...domain._tags import LayerTag
from ..encoding._b64 import ndarray_to_payload, tensor_from_node


def _require(node: Mapping[str, Any], key: str, tag: LayerTag) -> Any:
    if key not in node:
        raise ValueError(f"'{tag.value}' record is missing field '{key}'")
    return node[key]


def _as_window(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"window must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"window must be an integer, got {value!r}")
        value = int(value)
    if not isinstance(value, (int, np.integer)):
        raise ValueError(f"window must be an integer, got {value!r}")
    return int(value)


@dataclass(frozen=True, eq=False)
class ConvolutionRecord:
    """Reconstruction data for a convolution layer: its (K, kh, kw) kernel."""

    kernel: np.ndarray

    tag: ClassVar[LayerTag] = LayerTag.CONVOLUTION

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.tag.value, "kernel": ndarray_to_payload(self.kernel)}

    @classmethod
    def from_dict(cls, node: Mapping[str, Any]) -> "ConvolutionRecord":
        return cls(kernel=tensor_from_node(_require(node, "kernel", cls.tag)))


@dataclass(frozen=True)
class MaxPoolRecord:
    """Reconstruction data for a max-pooling layer: its window size."""

    window: int

    tag: ClassVar[LayerTag] = LayerTag.MAX_POOL

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.tag.value, "window": int(self.window)}

    @classmethod
    def from_dict(cls, node: Mapping[str, Any]) -> "MaxPoolRecord":
        return cls(window=_as_window(_require(node, "window", cls.tag)))


@dataclass(frozen=True, eq=False)
class FullyConnectedRecord:
    """
    Reconstruction data for a fully connected layer.

    Attributes
    ----------
    weights : np.ndarray
        Weight matrix of shape (out_features, in_features).
    biases : np.ndarray
        Bias vector of shape (out_features,).
    """

    weights: np.ndarray
    biases: np.ndarray

    tag: ClassVar[LayerTag] = LayerTag.FULLY_CONNECTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.tag.value,
            "weights": ndarray_to_payload(self.weights),
            "biases": ndarray_to_payload(self.biases),
        }

    @classmethod
    def from_dict(cls, node: Mapping[str, Any]) -> "FullyConnectedRecord":
        return cls(
            weights=tensor_from_node(_require(node, "weights", cls.tag)),
            biases=tensor_from_node(_require(node, "biases", cls.tag)),
        )


class _PayloadFreeRecord:
    tag: ClassVar[LayerTag]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.tag.value}

    @classmethod
    def from_dict(cls, node: Mapping[str, Any]) -> Any:
        _ = node
        return cls()


@dataclass(frozen=True)
class ReluRecord(_PayloadFreeRecord):
    tag: ClassVar[LayerTag] = LayerTag.RELU


@dataclass(frozen=True)
class FlattenRecord(_PayloadFreeRecord):
    tag: ClassVar[LayerTag] = LayerTag.FLATTEN


@dataclass(frozen=True)
class NormalizeRecord(_PayloadFreeRecord):
    tag: ClassVar[LayerTag] = LayerTag.NORMALIZE


LayerRecord = Union[
    ConvolutionRecord,
    MaxPoolRecord,
    FullyConnectedRecord,
    ReluRecord,
    FlattenRecord,
    NormalizeRecord,
]

RECORD_TYPES: Dict[LayerTag, Type[Any]] = {
    ConvolutionRecord.tag: ConvolutionRecord,
    MaxPoolRecord.tag: MaxPoolRecord,
    FullyConnectedRecord.tag: FullyConnectedRecord,
    ReluRecord.tag: ReluRecord,
    FlattenRecord.tag: FlattenRecord,
    NormalizeRecord.tag: NormalizeRecord,
}

_missing = [t.value for t in LayerTag if t not in RECORD_TYPES]
if _missing:
    raise RuntimeError(f"Layer tags without a record type: {_missing}")


def is_layer_record(obj: Any) -> bool:
    return isinstance(obj, tuple(RECORD_TYPES.values()))


def layer_record_from_dict(node: Mapping[str, Any]) -> LayerRecord:
    """
    Rebuild a layer record from its dict form.

    Parameters
    ----------
    node : Mapping[str, Any]
        Dict carrying a `type` discriminator plus the variant's fields.

    Returns
    -------
    LayerRecord
        The decoded record.

    Raises
    ------
    UnknownLayerKindError
        If `type` is missing or names no known layer kind.
    ValueError
        If a required field is missing or malformed.
    """
    if not isinstance(node, Mapping):
        raise ValueError(f"layer entry must be a mapping, got {type(node).__name__}")
    if "type" not in node:
        raise UnknownLayerKindError(None)

    tag = LayerTag.parse(node["type"])
    return RECORD_TYPES[tag].from_dict(node)
