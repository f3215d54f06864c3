import unittest

import numpy as np

from seqnet.infrastructure.ops.conv_cpu import (
    conv_output_hw,
    convolution_forward_cpu,
    convolution_num_muls,
)


def _ref_convolution(x: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Direct per-channel cross-correlation, summed over input channels.
    """
    C, H, W = x.shape
    K, kh, kw = kernel.shape
    H_out, W_out = H - kh + 1, W - kw + 1
    y = np.zeros((K, H_out, W_out), dtype=np.float64)
    for k in range(K):
        for c in range(C):
            for i in range(H_out):
                for j in range(W_out):
                    y[k, i, j] += np.sum(
                        x[c, i : i + kh, j : j + kw].astype(np.float64) * kernel[k]
                    )
    return y


class TestConvolutionForwardCPU(unittest.TestCase):
    def test_matches_direct_reference(self) -> None:
        rng = np.random.default_rng(0)
        x = rng.integers(-3, 4, size=(2, 5, 6)).astype(np.float32)
        kernel = rng.integers(-2, 3, size=(3, 2, 3)).astype(np.float32)

        y = convolution_forward_cpu(x, kernel)

        self.assertEqual(y.shape, (3, 4, 4))
        self.assertEqual(y.dtype, np.float32)
        np.testing.assert_allclose(y, _ref_convolution(x, kernel), rtol=0, atol=1e-5)

    def test_identity_kernel(self) -> None:
        x = np.arange(9, dtype=np.float32).reshape(1, 3, 3)
        kernel = np.ones((1, 1, 1), dtype=np.float32)
        np.testing.assert_array_equal(convolution_forward_cpu(x, kernel), x)

    def test_kernel_larger_than_input_raises(self) -> None:
        x = np.zeros((1, 2, 2), dtype=np.float32)
        kernel = np.zeros((1, 3, 3), dtype=np.float32)
        with self.assertRaises(ValueError):
            convolution_forward_cpu(x, kernel)

    def test_wrong_rank_raises(self) -> None:
        with self.assertRaises(ValueError):
            convolution_forward_cpu(np.zeros((4, 4), dtype=np.float32), np.ones((1, 2, 2)))

    def test_output_hw_and_mul_count(self) -> None:
        self.assertEqual(conv_output_hw(5, 5, 2, 2), (4, 4))
        # K * H_out * W_out * kh * kw = 3 * 4 * 4 * 2 * 2
        self.assertEqual(convolution_num_muls((2, 5, 5), (3, 2, 2)), 192)

    def test_mul_count_does_not_scale_with_channels(self) -> None:
        # Channels are summed once, before the filters run.
        self.assertEqual(
            convolution_num_muls((1, 5, 5), (3, 2, 2)),
            convolution_num_muls((8, 5, 5), (3, 2, 2)),
        )


if __name__ == "__main__":
    unittest.main()
