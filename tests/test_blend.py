"""
Tests for the multiply blend.

- bounds and identities over the full 8-bit range
- monotonic in both arguments
- vectorised version agrees with the scalar one
"""

import numpy as np
import pytest

from chromamask.blend import multiply, multiply_arrays


class TestMultiply:
    """Scalar blend."""

    def test_identities(self):
        """Black annihilates, white is the identity."""
        for a in range(256):
            assert multiply(a, 0) == 0
            assert multiply(0, a) == 0
            assert multiply(a, 255) == a
            assert multiply(255, a) == a
        assert multiply(255, 255) == 255

    def test_bounds_and_monotonic(self):
        """Results stay in [0, 255] and never decrease as an input grows."""
        for a in range(256):
            prev = -1
            for b in range(256):
                v = multiply(a, b)
                assert 0 <= v <= 255
                assert v >= prev
                prev = v

    def test_symmetric(self):
        for a in range(0, 256, 5):
            for b in range(0, 256, 7):
                assert multiply(a, b) == multiply(b, a)

    def test_truncates(self):
        """128*128/255 = 64.25 -> 64, 254*254/255 = 253.0039 -> 253."""
        assert multiply(128, 128) == 64
        assert multiply(254, 254) == 253
        assert multiply(1, 254) == 0

    @pytest.mark.parametrize("a,b", [(-1, 0), (0, 256), (300, 10)])
    def test_rejects_out_of_range(self, a, b):
        with pytest.raises(ValueError):
            multiply(a, b)


class TestMultiplyArrays:
    """Vectorised blend."""

    def test_matches_scalar(self):
        a, b = np.meshgrid(np.arange(256, dtype=np.uint8), np.arange(256, dtype=np.uint8))
        out = multiply_arrays(a, b)
        assert out.dtype == np.uint8
        for x, y in [(0, 0), (255, 255), (128, 128), (17, 200), (254, 3)]:
            assert out[y, x] == multiply(x, y)
        expected = (a.astype(np.int64) * b.astype(np.int64)) // 255
        assert np.array_equal(out, expected)

    def test_no_uint8_overflow(self):
        a = np.full((2, 2, 3), 255, dtype=np.uint8)
        assert np.all(multiply_arrays(a, a) == 255)
