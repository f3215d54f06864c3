import unittest
from unittest.mock import patch

import numpy as np

from seqnet import (
    Convolution,
    ConvolutionRecord,
    Flatten,
    FlattenRecord,
    FullyConnected,
    FullyConnectedRecord,
    Layer,
    LayerFactory,
    LayerTag,
    MaxPool,
    MaxPoolRecord,
    Normalize,
    NormalizeRecord,
    Relu,
    ReluRecord,
    UnknownLayerKindError,
)


class _DummyRelu(Layer):
    tag = LayerTag.RELU

    def __init__(self, input_shape=(1,)) -> None:
        self._shape = tuple(input_shape)

    def apply(self, x):
        return x

    def input_shape(self):
        return self._shape

    def output_shape(self):
        return self._shape

    def to_record(self):
        return ReluRecord()

    @classmethod
    def from_record(cls, record, input_shape):
        return cls(input_shape)


class TestLayerFactoryRegistry(unittest.TestCase):
    def test_registry_is_exhaustive(self) -> None:
        self.assertTrue(LayerFactory.is_exhaustive())
        self.assertEqual(LayerFactory.missing(), ())
        self.assertEqual(LayerFactory.registered(), tuple(LayerTag))

    def test_layer_class_lookup(self) -> None:
        self.assertIs(LayerFactory.layer_class("Max-Pool"), MaxPool)
        self.assertIs(LayerFactory.layer_class(LayerTag.FULLY_CONNECTED), FullyConnected)
        with self.assertRaises(UnknownLayerKindError):
            LayerFactory.layer_class("softmax")

    def test_duplicate_registration_rejected(self) -> None:
        with self.assertRaises(ValueError):
            LayerFactory.register()(_DummyRelu)

    def test_tag_mismatch_rejected(self) -> None:
        with patch.dict(LayerFactory.BUILDERS):
            with self.assertRaises(ValueError):
                LayerFactory.register(LayerTag.FLATTEN, overwrite=True)(_DummyRelu)

    def test_overwrite_registration(self) -> None:
        with patch.dict(LayerFactory.BUILDERS):
            LayerFactory.register(overwrite=True)(_DummyRelu)
            layer = LayerFactory.build(ReluRecord(), (1, 2, 2))
            self.assertIsInstance(layer, _DummyRelu)
        self.assertIs(LayerFactory.BUILDERS[LayerTag.RELU], Relu)

    def test_unregistered_tag_raises(self) -> None:
        with patch.dict(LayerFactory.BUILDERS, {}, clear=True):
            self.assertFalse(LayerFactory.is_exhaustive())
            with self.assertRaises(UnknownLayerKindError):
                LayerFactory.build(ReluRecord(), (1, 2, 2))


class TestLayerFactoryBuild(unittest.TestCase):
    def test_build_each_variant(self) -> None:
        kernel = np.ones((2, 3, 3), dtype=np.float32)
        W = np.ones((4, 8), dtype=np.float32)
        b = np.zeros((4,), dtype=np.float32)

        cases = [
            (ConvolutionRecord(kernel=kernel), (1, 5, 5), Convolution, (2, 3, 3)),
            (MaxPoolRecord(window=2), (2, 4, 4), MaxPool, (2, 2, 2)),
            (FullyConnectedRecord(weights=W, biases=b), None, FullyConnected, (4,)),
            (ReluRecord(), (3,), Relu, (3,)),
            (FlattenRecord(), (2, 2, 2), Flatten, (8,)),
            (NormalizeRecord(), (1, 2, 2), Normalize, (1, 2, 2)),
        ]
        for record, input_shape, cls, out_shape in cases:
            with self.subTest(tag=record.tag):
                layer = LayerFactory.build(record, input_shape)
                self.assertIsInstance(layer, cls)
                self.assertIs(layer.tag, record.tag)
                self.assertEqual(layer.output_shape(), out_shape)

    def test_build_passes_parameters_through(self) -> None:
        kernel = np.arange(8, dtype=np.float32).reshape(2, 2, 2)
        layer = LayerFactory.build(ConvolutionRecord(kernel=kernel), (1, 3, 3))
        self.assertTrue(np.shares_memory(layer.kernel, kernel))

    def test_build_fully_connected_uses_recorded_parameters(self) -> None:
        """
        The fully-connected record's weights and biases are used as-is; the
        layer is never default-initialized during reconstruction.
        """
        W = np.array([[2.0, -1.0]], dtype=np.float32)
        b = np.array([0.25], dtype=np.float32)
        layer = LayerFactory.build(FullyConnectedRecord(weights=W, biases=b))
        np.testing.assert_array_equal(layer.weights, W)
        np.testing.assert_array_equal(layer.biases, b)
        np.testing.assert_array_equal(
            layer.apply(np.array([1.0, 1.0], dtype=np.float32)), [1.25]
        )

    def test_build_without_required_shape_raises(self) -> None:
        with self.assertRaises(ValueError):
            LayerFactory.build(MaxPoolRecord(window=2))
        with self.assertRaises(ValueError):
            LayerFactory.build(FlattenRecord())

    def test_build_non_record_raises_unknown_kind(self) -> None:
        with self.assertRaises(UnknownLayerKindError):
            LayerFactory.build({"type": "relu"}, (1,))

        class FakeRecord:
            tag = "softmax"

        with self.assertRaises(UnknownLayerKindError):
            LayerFactory.build(FakeRecord(), (1,))

    def test_to_record(self) -> None:
        record = LayerFactory.to_record(MaxPool(window=2, input_shape=(1, 4, 4)))
        self.assertEqual(record, MaxPoolRecord(window=2))

        with self.assertRaises(TypeError):
            LayerFactory.to_record("relu")  # type: ignore[arg-type]

        class Mislabelled(_DummyRelu):
            def to_record(self):
                return FlattenRecord()

        with self.assertRaises(RuntimeError):
            LayerFactory.to_record(Mislabelled())


if __name__ == "__main__":
    unittest.main()
