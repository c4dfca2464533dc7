"""Mask-driven colour-vision deficiency and channel-pattern filters."""

__version__ = "0.1.0"
