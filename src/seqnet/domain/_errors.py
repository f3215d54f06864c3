"""
Structural errors raised by the network core.

This module defines the error taxonomy used when building, reconstructing,
or executing a feed-forward network. All errors describe deterministic
structural failures (a malformed record, an unsupported tensor rank, two
layers that disagree on a shape); none of them are transient, so callers
should never retry on them.

Every error derives from `NetworkError`, allowing callers at the I/O or CLI
boundary to catch the whole family with a single `except` clause while still
being able to distinguish individual kinds.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple


def _fmt_shape(shape: Optional[Sequence[int]]) -> str:
    if shape is None:
        return "<unknown>"
    return "(" + ", ".join(str(int(d)) for d in shape) + ")"


class NetworkError(RuntimeError):
    """
    Base class for all structural network errors.
    """


class UnknownLayerKindError(NetworkError, ValueError):
    """
    Raised when a layer record (or a serialized `type` discriminator) names a
    layer kind that the factory does not recognize.

    Attributes
    ----------
    kind : object
        The offending tag, discriminator string, or record object.
    """

    def __init__(self, kind: object) -> None:
        """
        Initialize the UnknownLayerKindError.

        Parameters
        ----------
        kind : object
            The layer kind that could not be resolved.
        """
        super().__init__(f"Unknown layer kind: {kind!r}.")
        self.kind = kind


class NetworkDeserializationError(NetworkError):
    """
    Raised when a network record cannot be turned back into a network.

    The failure is all-or-nothing: no partially built network is ever
    returned. The underlying per-layer error is available through
    `__cause__`.

    Attributes
    ----------
    index : Optional[int]
        Position of the layer that failed to build, or None when the failure
        concerns the record envelope itself (format tag, input shape).
    """

    def __init__(self, message: str, index: Optional[int] = None) -> None:
        """
        Initialize the NetworkDeserializationError.

        Parameters
        ----------
        message : str
            Description of the failure.
        index : Optional[int], optional
            Index of the failing layer, if any.
        """
        if index is not None:
            message = f"Failed to build layer {index}: {message}"
        super().__init__(message)
        self.index = index


class UnsupportedRankError(NetworkError):
    """
    Raised when the forward pass is requested for a tensor rank the network
    does not support.

    Attributes
    ----------
    rank : int
        The rank that was requested.
    supported : int
        The one rank accepted by the forward-pass driver.
    """

    def __init__(self, rank: int, supported: int) -> None:
        super().__init__(
            f"Unsupported input rank {rank}; only rank {supported} tensors are accepted."
        )
        self.rank = rank
        self.supported = supported


class ShapeMismatchError(NetworkError):
    """
    Raised when a layer would receive a tensor whose shape differs from the
    shape it declares as its input.

    Attributes
    ----------
    index : int
        Index of the layer whose input shape was violated.
    expected : Tuple[int, ...]
        The layer's declared input shape.
    actual : Tuple[int, ...]
        The shape that would have been fed to it (the previous layer's
        output shape, or the network input shape for index 0).
    """

    def __init__(
        self,
        index: int,
        expected: Sequence[int],
        actual: Sequence[int],
    ) -> None:
        super().__init__(
            f"Shape mismatch at layer {index}: expects input {_fmt_shape(expected)}, "
            f"got {_fmt_shape(actual)}."
        )
        self.index = index
        self.expected: Tuple[int, ...] = tuple(int(d) for d in expected)
        self.actual: Tuple[int, ...] = tuple(int(d) for d in actual)
