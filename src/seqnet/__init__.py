"""
seqnet: the architecture layer of a feed-forward inference engine.

Public API
----------
- Layers: `Layer` (base), `Convolution`, `MaxPool`, `FullyConnected`,
  `Relu`, `Flatten`, `Normalize`
- Records: `LayerRecord` variants, `NetworkRecord`, `LayerTag`
- Conversion: `LayerFactory`
- Execution: `Network`, diagnostics sinks
- Errors: `NetworkError` and its subclasses
"""

from .domain._errors import (
    NetworkDeserializationError,
    NetworkError,
    ShapeMismatchError,
    UnknownLayerKindError,
    UnsupportedRankError,
)
from .domain._layer import ILayer
from .domain._tags import LayerTag
from .infrastructure._layer import Layer
from .infrastructure.factory._layer_factory import LayerFactory, register_layer
from .infrastructure.layers import (
    Convolution,
    Flatten,
    FullyConnected,
    MaxPool,
    Normalize,
    Relu,
)
from .infrastructure.network._diagnostics import (
    CollectingSink,
    DiagnosticsSink,
    LayerReport,
    format_layer_row,
    logging_sink,
    null_sink,
)
from .infrastructure.network._network import SUPPORTED_RANK, Network
from .infrastructure.records._layer_record import (
    ConvolutionRecord,
    FlattenRecord,
    FullyConnectedRecord,
    LayerRecord,
    MaxPoolRecord,
    NormalizeRecord,
    ReluRecord,
    layer_record_from_dict,
)
from .infrastructure.records._network_record import NETWORK_FORMAT, NetworkRecord

__version__ = "0.1.0"

__all__ = [
    "NetworkError",
    "UnknownLayerKindError",
    "NetworkDeserializationError",
    "UnsupportedRankError",
    "ShapeMismatchError",
    "ILayer",
    "LayerTag",
    "Layer",
    "LayerFactory",
    "register_layer",
    "Convolution",
    "MaxPool",
    "FullyConnected",
    "Relu",
    "Flatten",
    "Normalize",
    "LayerReport",
    "DiagnosticsSink",
    "CollectingSink",
    "format_layer_row",
    "logging_sink",
    "null_sink",
    "Network",
    "SUPPORTED_RANK",
    "LayerRecord",
    "ConvolutionRecord",
    "MaxPoolRecord",
    "FullyConnectedRecord",
    "ReluRecord",
    "FlattenRecord",
    "NormalizeRecord",
    "layer_record_from_dict",
    "NetworkRecord",
    "NETWORK_FORMAT",
]
