"""
Layer factory: bidirectional conversion between live layers and records.

Concrete layer classes register themselves with `@register_layer()`. The
registry is keyed by `LayerTag`, and each registered class supplies a
`from_record(record, input_shape)` classmethod. Building is a pure
construction step with no side effects beyond a debug log line.

Usage
-----
Registering a layer class:

    @register_layer()
    class Relu(StatelessLayerMixin, Layer):
        tag = LayerTag.RELU
        ...

Building from a record:

    layer = LayerFactory.build(ReluRecord(), input_shape=(1, 4, 4))

Notes
-----
- Registration happens at import time of `seqnet.infrastructure.layers`.
- `LayerFactory.is_exhaustive()` reports whether every `LayerTag` has a
  registered class.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Dict, Optional, Sequence, Tuple, Type, TypeVar

from ...domain._errors import UnknownLayerKindError
from ...domain._tags import LayerTag
from .._layer import Layer

logger = logging.getLogger(__name__)

L = TypeVar("L", bound=Type[Layer])


class LayerFactory:
    """
    Registry-backed builder of layers from layer records.
    """

    BUILDERS: ClassVar[Dict[LayerTag, Type[Layer]]] = {}

    @classmethod
    def register(
        cls, tag: Optional[LayerTag] = None, *, overwrite: bool = False
    ) -> Callable[[L], L]:
        """
        Decorator to register a layer class for its tag.

        Parameters
        ----------
        tag : Optional[LayerTag], optional
            Registry key. Defaults to the class's own `tag` attribute; when
            given, it must agree with it.
        overwrite : bool, optional
            If False (default), raises if the tag is already registered.
        """

        def decorator(layer_cls: L) -> L:
            own_tag = getattr(layer_cls, "tag", None)
            key = tag if tag is not None else own_tag
            if not isinstance(key, LayerTag):
                raise ValueError(
                    f"{layer_cls.__name__} must declare a LayerTag `tag` attribute"
                )
            if own_tag != key:
                raise ValueError(
                    f"{layer_cls.__name__}.tag is {own_tag!r}, but was registered as {key!r}"
                )
            if not callable(getattr(layer_cls, "from_record", None)):
                raise ValueError(f"{layer_cls.__name__} does not implement from_record()")
            if not overwrite and key in cls.BUILDERS:
                raise ValueError(
                    f"Layer kind {key.value!r} is already registered to "
                    f"{cls.BUILDERS[key].__name__}"
                )

            cls.BUILDERS[key] = layer_cls
            logger.debug("registered layer kind %s -> %s", key.value, layer_cls.__name__)
            return layer_cls

        return decorator

    @classmethod
    def registered(cls) -> Tuple[LayerTag, ...]:
        """Return registered tags in declaration order of `LayerTag`."""
        return tuple(t for t in LayerTag if t in cls.BUILDERS)

    @classmethod
    def missing(cls) -> Tuple[LayerTag, ...]:
        return tuple(t for t in LayerTag if t not in cls.BUILDERS)

    @classmethod
    def is_exhaustive(cls) -> bool:
        return not cls.missing()

    @classmethod
    def layer_class(cls, tag: "LayerTag | str") -> Type[Layer]:
        """
        Look up the registered class for a tag or serialized kind name.

        Raises
        ------
        UnknownLayerKindError
            If the kind is unknown or has no registered class.
        """
        key = LayerTag.parse(tag)
        try:
            return cls.BUILDERS[key]
        except KeyError as e:
            raise UnknownLayerKindError(key.value) from e

    @classmethod
    def build(cls, record: Any, input_shape: Optional[Sequence[int]] = None) -> Layer:
        """
        Construct a live layer from its record.

        Parameters
        ----------
        record : LayerRecord
            Record selecting the variant and carrying its parameters.
        input_shape : Optional[Sequence[int]], optional
            Shape the layer will receive. Required for every variant whose
            record does not determine its own input shape (all but
            fully-connected layers).

        Returns
        -------
        Layer
            The reconstructed layer. Parameter tensors are passed through
            without copying.

        Raises
        ------
        UnknownLayerKindError
            If the record's tag is not recognized.
        ValueError
            If the record's fields or `input_shape` are invalid for the layer.
        """
        tag = getattr(record, "tag", None)
        if not isinstance(tag, LayerTag):
            raise UnknownLayerKindError(type(record).__name__)

        layer_cls = cls.BUILDERS.get(tag)
        if layer_cls is None:
            raise UnknownLayerKindError(tag.value)

        layer = layer_cls.from_record(record, input_shape)  # type: ignore[attr-defined]
        logger.debug(
            "built %s layer: %s -> %s",
            tag.value,
            layer.input_shape(),
            layer.output_shape(),
        )
        return layer

    @staticmethod
    def to_record(layer: Layer) -> Any:
        """
        Convert a live layer into its record.

        Raises
        ------
        TypeError
            If `layer` is not a `Layer`.
        RuntimeError
            If the produced record's tag differs from the layer's tag.
        """
        if not isinstance(layer, Layer):
            raise TypeError(f"expected a Layer, got {type(layer).__name__}")

        record = layer.to_record()
        if getattr(record, "tag", None) != layer.tag:
            raise RuntimeError(
                f"{type(layer).__name__}.to_record() returned a "
                f"{type(record).__name__} with a different tag"
            )
        return record


def register_layer(
    tag: Optional[LayerTag] = None, *, overwrite: bool = False
) -> Callable[[L], L]:
    """
    Module-level alias of `LayerFactory.register`.
    """
    return LayerFactory.register(tag, overwrite=overwrite)
