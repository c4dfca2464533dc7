from __future__ import annotations

import numpy as np
from PIL import Image

# single-channel integer modes that hold 16-bit samples
_WIDE_GRAY_MODES = ("I", "I;16", "I;16B", "I;16L", "I;16N")


def rgb8_array(img: Image.Image) -> np.ndarray:
    """Writable (H, W, 3) uint8 copy of ``img``.

    16-bit grayscale is scaled down to 8 bits (high byte), not clipped.
    """
    if img.mode in _WIDE_GRAY_MODES:
        wide = np.asarray(img).astype(np.int64) >> 8
        gray = np.clip(wide, 0, 255).astype(np.uint8)
        return np.repeat(gray[..., None], 3, axis=2)
    return np.array(img.convert("RGB"), dtype=np.uint8)
