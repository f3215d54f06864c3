"""
Persisted-network representation.

`NetworkRecord` is the one persisted shape of a network: the ordered list of
full layer records plus the network's input shape. The input shape is stored
once at the network level; each layer's own input shape is recovered during
reconstruction by threading shapes through the layers in order.

A tag-only manifest (`NetworkRecord.tags()`) is available for inspection, but
it is never a persisted form: it cannot reconstruct parameters.

JSON envelope
-------------
{
  "format": "seqnet.json.network.v1",
  "input_shape": [C, H, W],
  "layers": [{"type": "...", ...}, ...]
}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple

from ...domain._errors import NetworkDeserializationError
from ...domain._tags import LayerTag
from ._layer_record import LayerRecord, is_layer_record, layer_record_from_dict

NETWORK_FORMAT = "seqnet.json.network.v1"


def _decode_shape(raw: Any) -> Tuple[int, ...]:
    """
    Decode a persisted shape: a list of positive integers.

    Integral floats such as `4.0` are accepted; strings, bools and
    fractional values are not.

    Raises
    ------
    NetworkDeserializationError
        If `raw` is not a list of positive integers.
    """
    if not isinstance(raw, (list, tuple)):
        raise NetworkDeserializationError(
            f"input_shape must be a list of ints, got {raw!r}"
        )

    dims = []
    for d in raw:
        if isinstance(d, float) and d.is_integer():
            d = int(d)
        if isinstance(d, bool) or not isinstance(d, int) or d <= 0:
            raise NetworkDeserializationError(
                f"input_shape must contain positive ints, got {raw!r}"
            )
        dims.append(d)
    return tuple(dims)


@dataclass(frozen=True, eq=False)
class NetworkRecord:
    """
    Ordered, serializable description of a whole network.

    Attributes
    ----------
    layers : Tuple[LayerRecord, ...]
        Layer records in forward order.
    input_shape : Optional[Tuple[int, ...]]
        Shape accepted by the first layer. Only an empty network may leave it
        unset.
    """

    layers: Tuple[LayerRecord, ...] = ()
    input_shape: Optional[Tuple[int, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "layers", tuple(self.layers))
        if self.input_shape is not None:
            object.__setattr__(
                self, "input_shape", tuple(int(d) for d in self.input_shape)
            )

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[LayerRecord]:
        return iter(self.layers)

    def tags(self) -> Tuple[LayerTag, ...]:
        """Return the parameter-free manifest of layer kinds, in order."""
        return tuple(r.tag for r in self.layers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": NETWORK_FORMAT,
            "input_shape": (
                None if self.input_shape is None else list(self.input_shape)
            ),
            "layers": [r.to_dict() for r in self.layers],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "NetworkRecord":
        """
        Decode a record from its dict envelope.

        Raises
        ------
        NetworkDeserializationError
            If the envelope is malformed, the format is unsupported, or any
            layer entry fails to decode (the failing index is reported and the
            original error is chained).
        """
        if not isinstance(payload, Mapping):
            raise NetworkDeserializationError(
                f"network payload must be a mapping, got {type(payload).__name__}"
            )

        fmt = payload.get("format")
        if fmt != NETWORK_FORMAT:
            raise NetworkDeserializationError(f"Unsupported network format: {fmt!r}")

        entries = payload.get("layers", [])
        if not isinstance(entries, Sequence) or isinstance(entries, (str, bytes)):
            raise NetworkDeserializationError("'layers' must be a list of layer entries")

        raw_shape = payload.get("input_shape")
        input_shape = None if raw_shape is None else _decode_shape(raw_shape)

        layers = []
        for i, node in enumerate(entries):
            try:
                layers.append(layer_record_from_dict(node))
            except (KeyError, TypeError, ValueError) as e:
                raise NetworkDeserializationError(str(e), index=i) from e

        return cls(layers=tuple(layers), input_shape=input_shape)

    def to_json(self, *, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_json(cls, text: str) -> "NetworkRecord":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise NetworkDeserializationError(f"invalid JSON: {e}") from e
        return cls.from_dict(payload)

    @classmethod
    def of(
        cls, layers: Sequence[Any], input_shape: Optional[Sequence[int]] = None
    ) -> "NetworkRecord":
        """
        Build a record from a sequence of layer records, checking each entry.

        Raises
        ------
        TypeError
            If an entry is not a layer record.
        """
        for i, r in enumerate(layers):
            if not is_layer_record(r):
                raise TypeError(
                    f"entry {i} is not a layer record: {type(r).__name__}"
                )
        return cls(
            layers=tuple(layers),
            input_shape=None if input_shape is None else tuple(input_shape),
        )
