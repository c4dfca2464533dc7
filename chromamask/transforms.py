from __future__ import annotations
from typing import List, Tuple
import concurrent.futures as cf
import logging

import numpy as np

from chromamask.blend import multiply, multiply_arrays
from chromamask.channels import Channel
from chromamask.errors import InvalidBufferError
from chromamask.mask import TiledMask

logger = logging.getLogger(__name__)

Pixel = Tuple[int, int, int]


def row_bands(height: int, count: int) -> List[Tuple[int, int]]:
    """Split rows 0..height into at most ``count`` contiguous (start, stop) bands."""
    count = max(1, min(count, height))
    step, extra = divmod(height, count)
    bands, start = [], 0
    for i in range(count):
        stop = start + step + (1 if i < extra else 0)
        bands.append((start, stop))
        start = stop
    return bands


def check_buffer(buffer: np.ndarray) -> None:
    if not isinstance(buffer, np.ndarray):
        raise InvalidBufferError(f"expected a numpy array, got {type(buffer).__name__}")
    if buffer.ndim != 3 or buffer.shape[2] != 3:
        raise InvalidBufferError(f"expected an (H, W, 3) buffer, got shape {buffer.shape}")
    if buffer.dtype != np.uint8:
        raise InvalidBufferError(f"expected uint8 pixels, got {buffer.dtype}")
    if not buffer.flags.writeable:
        raise InvalidBufferError("buffer is read-only")


class Transform:
    """Per-pixel mapping driven by a tiled mask.

    Subclasses implement ``apply_pixel`` (scalar reference) and
    ``apply_block`` (vectorised, in place); both must agree pixel for pixel.
    """
    name = "transform"
    luma_output = False

    def __init__(self, mask: TiledMask):
        self.mask = mask

    def apply_pixel(self, x: int, y: int, colour: Pixel) -> Pixel:
        raise NotImplementedError

    def apply_block(self, block: np.ndarray, x0: int = 0, y0: int = 0) -> None:
        raise NotImplementedError

    def apply_image(self, buffer: np.ndarray, workers: int = 1) -> np.ndarray:
        """Map the transform over every pixel of ``buffer`` in place."""
        check_buffer(buffer)
        h, w = buffer.shape[:2]
        if h == 0 or w == 0:
            return buffer
        bands = row_bands(h, workers)
        logger.debug("%s: %dx%d image, mask %s, %d band(s)", self.name, w, h, self.mask, len(bands))

        if len(bands) == 1:
            self.apply_block(buffer, 0, 0)
            return buffer

        # bands are disjoint row slices; the mask is read-only
        with cf.ThreadPoolExecutor(max_workers=len(bands)) as ex:
            futures = [ex.submit(self.apply_block, buffer[y0:y1], 0, y0) for y0, y1 in bands]
            for fut in cf.as_completed(futures):
                fut.result()
        return buffer


class ChannelPatternTransform(Transform):
    """Multiply each channel by the mask, keep the strongest, flatten to gray."""
    name = "pattern"
    luma_output = True

    def apply_pixel(self, x: int, y: int, colour: Pixel) -> Pixel:
        m = self.mask.sample(x, y)
        intensity = max(multiply(c, mc) for c, mc in zip(colour, m))
        return intensity, intensity, intensity

    def apply_block(self, block: np.ndarray, x0: int = 0, y0: int = 0) -> None:
        h, w = block.shape[:2]
        m = self.mask.tile(w, h, x0, y0)
        intensity = multiply_arrays(block, m).max(axis=2)
        block[...] = intensity[..., None]


class MonochromacyTransform(ChannelPatternTransform):
    """Total colour-vision loss: luma collapse weighted by a filter mask."""
    name = "monochromacy"


class DichromacyTransform(Transform):
    """
    Loss of one colour channel, gated by a stencil mask.

    Wherever the mask's red channel is exactly 0 the pixel collapses to gray
    at the intensity of ``missing_colour``; elsewhere it passes through. Only
    the red mask channel is tested, whatever the missing colour is.
    """
    name = "dichromacy"

    def __init__(self, mask: TiledMask, missing_colour: Channel):
        super().__init__(mask)
        self.missing_colour = missing_colour

    def apply_pixel(self, x: int, y: int, colour: Pixel) -> Pixel:
        if self.mask.sample(x, y)[0] == 0:
            v = colour[self.missing_colour.index]
            return v, v, v
        return tuple(colour)

    def apply_block(self, block: np.ndarray, x0: int = 0, y0: int = 0) -> None:
        h, w = block.shape[:2]
        affected = self.mask.tile(w, h, x0, y0)[..., 0] == 0
        c = self.missing_colour.index
        block[affected] = block[affected][:, c:c + 1]
