from __future__ import annotations
import numpy as np


def multiply(a: int, b: int) -> int:
    """Normalized multiply of two 8-bit channel values, truncated toward zero.

    ``a/255 * b/255 * 255`` reduces to ``a*b/255``; integer floor keeps
    ``multiply(a, 255) == a`` exact for every ``a``.
    """
    if not (0 <= a <= 255 and 0 <= b <= 255):
        raise ValueError(f"channel values must be in [0, 255], got {a}, {b}")
    return (int(a) * int(b)) // 255


def multiply_arrays(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    # uint16 holds 255*255
    out = (a.astype(np.uint16) * b.astype(np.uint16)) // 255
    return out.astype(np.uint8)
