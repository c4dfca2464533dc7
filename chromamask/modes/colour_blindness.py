from __future__ import annotations

from chromamask.channels import Channel, channel_names
from chromamask.io_utils import FILTERS
from chromamask.mask import TiledMask
from chromamask.modes_core import mode, Enum
from chromamask.transforms import DichromacyTransform, MonochromacyTransform


@mode("monochromacy", mask_kind=FILTERS, luma_output=True, aliases=("1",),
      help="collapse every pixel to a single luma value weighted by a filter mask")
def monochromacy(mask: TiledMask) -> MonochromacyTransform:
    return MonochromacyTransform(mask)


@mode("dichromacy", mask_kind=FILTERS, luma_output=False, aliases=("2",),
      options={"colour": Enum(None, channel_names(), parse=Channel.parse,
                              help="the colour the viewer cannot perceive")},
      name_parts=("colour",),
      help="collapse stencilled regions to the intensity of the missing colour")
def dichromacy(mask: TiledMask, colour: Channel) -> DichromacyTransform:
    return DichromacyTransform(mask, colour)
