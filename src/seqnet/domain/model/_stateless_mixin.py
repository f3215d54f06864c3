"""
Stateless reconstruction mixin.

This module defines `StatelessLayerMixin`, a helper mixin for layers that own
no parameters and whose behavior is fully determined by their class and the
input shape they were bound to (e.g. Relu, Flatten, Normalize).

It provides the record-reconstruction hook for such layers, so they take part
in network deserialization without special cases.
"""

from typing import Any, Optional, Sequence
from typing_extensions import Self


class StatelessLayerMixin:
    """
    Mixin providing `from_record` for parameter-free layers.

    The host class must accept an `input_shape` keyword argument.
    """

    @classmethod
    def from_record(cls, record: Any, input_shape: Optional[Sequence[int]]) -> Self:
        """
        Reconstruct the layer from its (payload-free) record.

        The record carries no fields, so it is ignored apart from having
        selected this class.

        Parameters
        ----------
        record : Any
            Payload-free record of the host layer's kind.
        input_shape : Optional[Sequence[int]]
            Shape the rebuilt layer will receive.

        Raises
        ------
        ValueError
            If `input_shape` is None.
        """
        _ = record
        if input_shape is None:
            raise ValueError(f"{cls.__name__} requires an input_shape to be built")
        return cls(input_shape=tuple(input_shape))  # type: ignore[call-arg]
