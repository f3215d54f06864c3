"""
Domain-level structural typing for tensors.

The network core moves dense, n-dimensional numeric arrays between layers.
This module describes the small subset of the NumPy `ndarray` surface that the
domain contracts rely on, without importing NumPy into the domain layer.

`numpy.ndarray` satisfies this protocol; so does any array type that mimics
its shape/copy semantics.
"""

from __future__ import annotations

from typing import Any, Protocol, Tuple, runtime_checkable


@runtime_checkable
class TensorLike(Protocol):
    """
    Structural interface for dense n-dimensional arrays.

    Notes
    -----
    - Rank is `ndim`, the number of dimensions.
    - `copy()` must return an independent array; layers rely on it to avoid
      mutating the tensors they receive.
    """

    @property
    def shape(self) -> Tuple[int, ...]:
        """Dimension sizes, outermost first."""
        ...

    @property
    def ndim(self) -> int:
        """Number of dimensions (the tensor rank)."""
        ...

    @property
    def size(self) -> int:
        """Total number of scalar elements."""
        ...

    @property
    def dtype(self) -> Any:
        """Element type descriptor."""
        ...

    def copy(self) -> "TensorLike":
        """Return an independent copy of the array."""
        ...

    def reshape(self, *shape: int) -> "TensorLike":
        """Return the same data viewed with a different shape."""
        ...
