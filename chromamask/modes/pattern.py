from __future__ import annotations

from chromamask.io_utils import PATTERNS
from chromamask.mask import TiledMask
from chromamask.modes_core import mode
from chromamask.transforms import ChannelPatternTransform


@mode("pattern", mask_kind=PATTERNS, luma_output=True,
      help="grayscale halftone composite of the image and a tiled pattern")
def pattern(mask: TiledMask) -> ChannelPatternTransform:
    return ChannelPatternTransform(mask)
