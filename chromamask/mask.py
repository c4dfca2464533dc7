from __future__ import annotations
from typing import Tuple

import numpy as np
from PIL import Image

from chromamask.convert import rgb8_array
from chromamask.errors import DegenerateMaskError, InvalidBufferError


class TiledMask:
    """Read-only mask image repeated indefinitely over a larger target.

    Lookups wrap coordinates modulo the mask size: nearest pixel, no
    resampling or interpolation.
    """

    def __init__(self, pixels: np.ndarray, name: str = "<memory>"):
        arr = np.asarray(pixels)
        if arr.ndim == 2:
            arr = np.repeat(arr[..., None], 3, axis=2)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise InvalidBufferError(f"mask {name!r} must be an (H, W, 3) array, got shape {arr.shape}")
        if arr.dtype != np.uint8:
            raise InvalidBufferError(f"mask {name!r} must hold uint8 pixels, got {arr.dtype}")
        h, w = arr.shape[:2]
        if h == 0 or w == 0:
            raise DegenerateMaskError(f"mask {name!r} has zero size ({w}x{h})")
        # own copy; callers may keep mutating whatever they passed in
        arr = np.array(arr[:, :, :3], copy=True)
        arr.setflags(write=False)
        self._pixels = arr
        self.name = name

    @classmethod
    def from_image(cls, img: Image.Image, name: str = "<memory>") -> "TiledMask":
        if img.width == 0 or img.height == 0:
            raise DegenerateMaskError(f"mask {name!r} has zero size ({img.width}x{img.height})")
        return cls(rgb8_array(img), name=name)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    def sample(self, x: int, y: int) -> Tuple[int, int, int]:
        r, g, b = self._pixels[y % self.height, x % self.width]
        return int(r), int(g), int(b)

    def tile(self, width: int, height: int, x0: int = 0, y0: int = 0) -> np.ndarray:
        """Mask block covering target columns x0..x0+width and rows y0..y0+height."""
        ys = np.arange(y0, y0 + height) % self.height
        xs = np.arange(x0, x0 + width) % self.width
        return self._pixels[np.ix_(ys, xs)]

    def __repr__(self) -> str:
        return f"TiledMask({self.name!r}, {self.width}x{self.height})"
