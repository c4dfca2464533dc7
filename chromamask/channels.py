from __future__ import annotations
import enum

from chromamask.errors import ArgumentError


class Channel(enum.Enum):
    """One of the three RGB channels.

    The value is the position of the channel in a pixel array, so
    ``pixel[Channel.GREEN.index]`` is always the green component.
    """
    RED = 0
    GREEN = 1
    BLUE = 2

    @property
    def index(self) -> int:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Channel":
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise ArgumentError(
                f"unexpected colour argument {text!r} (expected one of: {', '.join(channel_names())})"
            ) from None

    def __str__(self) -> str:
        return self.name.lower()


def channel_names():
    return [str(c) for c in Channel]
