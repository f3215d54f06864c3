"""
Concrete layer variants.

Importing this package registers every layer class with `LayerFactory`.
"""

from ._convolution import Convolution
from ._flatten import Flatten
from ._fully_connected import FullyConnected
from ._maxpool import MaxPool
from ._normalize import Normalize
from ._relu import Relu

__all__ = [
    Convolution.__name__,
    MaxPool.__name__,
    FullyConnected.__name__,
    Relu.__name__,
    Flatten.__name__,
    Normalize.__name__,
]
