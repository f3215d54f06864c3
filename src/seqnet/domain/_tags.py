"""
Layer kind markers.

`LayerTag` names each supported layer variant without carrying any of its
parameters. Tags are used as the `type` discriminator of serialized layer
entries, as registry keys for the layer factory, and as a compact,
parameter-free manifest of a network's structure.
"""

from __future__ import annotations

from enum import Enum

from ._errors import UnknownLayerKindError


class LayerTag(str, Enum):
    """
    Enumeration of layer variants.

    Values are lowercase with underscores, matching the serialized `type`
    discriminator.
    """

    CONVOLUTION = "convolution"
    MAX_POOL = "max_pool"
    FULLY_CONNECTED = "fully_connected"
    RELU = "relu"
    FLATTEN = "flatten"
    NORMALIZE = "normalize"

    @classmethod
    def parse(cls, value: "str | LayerTag") -> "LayerTag":
        """
        Resolve a tag from its serialized name.

        Matching is case-insensitive, and hyphens or spaces are treated as
        underscores, so "Max-Pool", "MAX_POOL" and "max pool" all resolve to
        `LayerTag.MAX_POOL`.

        Parameters
        ----------
        value : str | LayerTag
            Serialized name or an existing tag.

        Returns
        -------
        LayerTag
            The matching tag.

        Raises
        ------
        UnknownLayerKindError
            If `value` does not name a known layer kind.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnknownLayerKindError(value)

        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError as e:
            raise UnknownLayerKindError(value) from e

    def __str__(self) -> str:
        return self.value
