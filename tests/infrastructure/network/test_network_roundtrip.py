import unittest
from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from seqnet import (
    Convolution,
    Flatten,
    FlattenRecord,
    FullyConnected,
    FullyConnectedRecord,
    MaxPool,
    MaxPoolRecord,
    Network,
    NetworkDeserializationError,
    NetworkRecord,
    Normalize,
    Relu,
    ReluRecord,
    ShapeMismatchError,
    UnknownLayerKindError,
)


def _cnn() -> Network:
    rng = np.random.default_rng(7)
    kernel = rng.standard_normal((3, 3, 3)).astype(np.float32)
    W = rng.standard_normal((4, 12)).astype(np.float32)
    b = rng.standard_normal((4,)).astype(np.float32)
    return Network(
        Normalize(input_shape=(2, 6, 6)),
        Convolution(kernel, input_shape=(2, 6, 6)),
        Relu(input_shape=(3, 4, 4)),
        MaxPool(window=2, input_shape=(3, 4, 4)),
        Flatten(input_shape=(3, 2, 2)),
        FullyConnected(W, b),
    )


class TestNetworkRoundTrip(unittest.TestCase):
    def _assert_equivalent(self, a: Network, b: Network) -> None:
        self.assertEqual(a.tags(), b.tags())
        self.assertEqual(a.input_shape(), b.input_shape())
        self.assertEqual(
            [l.output_shape() for l in a], [l.output_shape() for l in b]
        )
        self.assertEqual(
            [l.num_params() for l in a], [l.num_params() for l in b]
        )
        self.assertEqual([l.num_muls() for l in a], [l.num_muls() for l in b])

        x = np.random.default_rng(11).standard_normal(a.input_shape()).astype(np.float32)
        np.testing.assert_array_equal(a.apply(x), b.apply(x))

    def test_round_trip_through_record(self) -> None:
        net = _cnn()
        rebuilt = Network.from_record(net.to_record())
        self._assert_equivalent(net, rebuilt)

    def test_round_trip_through_json(self) -> None:
        net = _cnn()
        text = net.to_record().to_json(indent=2)
        rebuilt = Network.from_record(NetworkRecord.from_json(text))
        self._assert_equivalent(net, rebuilt)

    def test_record_preserves_order_and_input_shape(self) -> None:
        net = _cnn()
        record = net.to_record()
        self.assertEqual(record.tags(), net.tags())
        self.assertEqual(record.input_shape, (2, 6, 6))
        self.assertEqual(len(record), len(net))

    def test_fully_connected_parameters_survive_reconstruction(self) -> None:
        W = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]], dtype=np.float32)
        b = np.array([0.5, -0.5, 1.0], dtype=np.float32)
        net = Network(
            Flatten(input_shape=(1, 1, 2)),
            FullyConnected(W, b),
        )
        rebuilt = Network.from_record(NetworkRecord.from_json(net.to_record().to_json()))

        fc = rebuilt[1]
        self.assertIsInstance(fc, FullyConnected)
        np.testing.assert_array_equal(fc.weights, W)
        np.testing.assert_array_equal(fc.biases, b)

        x = np.array([[[1.0, 1.0]]], dtype=np.float32)
        np.testing.assert_array_equal(rebuilt.apply(x), [3.5, 6.5, 12.0])

    def test_in_memory_reconstruction_shares_weights(self) -> None:
        net = _cnn()
        rebuilt = Network.from_record(net.to_record())
        self.assertTrue(np.shares_memory(net[1].kernel, rebuilt[1].kernel))
        self.assertTrue(np.shares_memory(net[5].weights, rebuilt[5].weights))
        self.assertTrue(np.shares_memory(net[5].biases, rebuilt[5].biases))

    def test_shared_parameters_are_read_only(self) -> None:
        net = _cnn()
        with self.assertRaises(ValueError):
            net[5].weights[0, 0] = 1.0

    def test_empty_network_round_trip(self) -> None:
        record = Network().to_record()
        self.assertEqual(len(record), 0)
        self.assertIsNone(record.input_shape)

        rebuilt = Network.from_record(NetworkRecord.from_json(record.to_json()))
        self.assertEqual(len(rebuilt), 0)

    def test_sink_is_attached_to_rebuilt_network(self) -> None:
        seen = []
        rebuilt = Network.from_record(_cnn().to_record(), sink=seen.append)
        rebuilt.apply(np.zeros((2, 6, 6), dtype=np.float32))
        self.assertEqual(len(seen), 6)


@dataclass(frozen=True)
class _SoftmaxRecord:
    tag: ClassVar[str] = "softmax"


class TestNetworkReconstructionFailures(unittest.TestCase):
    def test_layer_failure_reports_index_and_cause(self) -> None:
        record = NetworkRecord(
            layers=(ReluRecord(), MaxPoolRecord(window=10)),
            input_shape=(1, 4, 4),
        )
        with self.assertRaises(NetworkDeserializationError) as cm:
            Network.from_record(record)
        self.assertEqual(cm.exception.index, 1)
        self.assertIsInstance(cm.exception.__cause__, ValueError)

    def test_unknown_kind_is_wrapped(self) -> None:
        record = NetworkRecord(
            layers=(ReluRecord(), _SoftmaxRecord()),  # type: ignore[arg-type]
            input_shape=(1, 2, 2),
        )
        with self.assertRaises(NetworkDeserializationError) as cm:
            Network.from_record(record)
        self.assertEqual(cm.exception.index, 1)
        self.assertIsInstance(cm.exception.__cause__, UnknownLayerKindError)

    def test_fully_connected_with_bad_biases_fails(self) -> None:
        record = NetworkRecord(
            layers=(
                FlattenRecord(),
                FullyConnectedRecord(
                    weights=np.ones((2, 4), dtype=np.float32),
                    biases=np.ones((3,), dtype=np.float32),
                ),
            ),
            input_shape=(1, 2, 2),
        )
        with self.assertRaises(NetworkDeserializationError) as cm:
            Network.from_record(record)
        self.assertEqual(cm.exception.index, 1)

    def test_mismatched_network_cannot_be_recorded(self) -> None:
        net = Network(Relu(input_shape=(1, 4, 4)), Flatten(input_shape=(2, 3, 4)))
        with self.assertRaises(ShapeMismatchError) as cm:
            net.to_record()
        self.assertEqual(cm.exception.index, 1)

    def test_mismatched_record_is_rejected(self) -> None:
        record = NetworkRecord(
            layers=(
                FlattenRecord(),
                FullyConnectedRecord(
                    weights=np.ones((2, 5), dtype=np.float32),
                    biases=np.ones((2,), dtype=np.float32),
                ),
            ),
            input_shape=(1, 2, 2),
        )
        with self.assertRaises(NetworkDeserializationError) as cm:
            Network.from_record(NetworkRecord.from_json(record.to_json()))
        self.assertEqual(cm.exception.index, 1)
        self.assertIsInstance(cm.exception.__cause__, ShapeMismatchError)
        self.assertEqual(cm.exception.__cause__.expected, (5,))
        self.assertEqual(cm.exception.__cause__.actual, (4,))

    def test_non_empty_record_requires_input_shape(self) -> None:
        with self.assertRaises(NetworkDeserializationError):
            Network.from_record(NetworkRecord(layers=(ReluRecord(),)))

    def test_rejects_non_records(self) -> None:
        with self.assertRaises(NetworkDeserializationError):
            Network.from_record({"layers": []})  # type: ignore[arg-type]

    def test_unknown_kind_in_json_is_rejected(self) -> None:
        text = (
            '{"format": "seqnet.json.network.v1", "input_shape": [1, 2, 2], '
            '"layers": [{"type": "relu"}, {"type": "softmax"}]}'
        )
        with self.assertRaises(NetworkDeserializationError) as cm:
            NetworkRecord.from_json(text)
        self.assertEqual(cm.exception.index, 1)
        self.assertIsInstance(cm.exception.__cause__, UnknownLayerKindError)


if __name__ == "__main__":
    unittest.main()
