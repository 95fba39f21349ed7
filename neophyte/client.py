"""
Client facade for the neophyte host

Typed wrappers over a channel's notify/request primitives. Setters truncate
their argument toward zero before it goes on the wire.
"""

import logging
import math
from typing import Any, List

from neophyte.rpc.channel_interface import ChannelInterface

logger = logging.getLogger(__name__)

METHOD_PREFIX = "neophyte"


class NeophyteClient:
    """Sends font settings to the host and queries it.

    Transport errors from the channel propagate unchanged.
    """

    def __init__(self, channel: ChannelInterface):
        self._channel = channel

    @property
    def channel(self) -> ChannelInterface:
        return self._channel

    def set_font_height(self, height: float) -> None:
        """Notify the host of a new font height, truncated to an integer."""
        self._notify("set_font_height", [math.trunc(height)])

    def set_font_width(self, width: float) -> None:
        """Notify the host of a new font width, truncated to an integer."""
        self._notify("set_font_width", [math.trunc(width)])

    def get_ten(self) -> Any:
        """Ask the host for ten.

        Returns the host's reply as-is, an integer from a conforming host.
        """
        return self._channel.request(f"{METHOD_PREFIX}.get_ten", [])

    def _notify(self, name: str, params: List[int]) -> None:
        method = f"{METHOD_PREFIX}.{name}"
        logger.debug(f"Notify {method} {params} on channel {self._channel.channel_id}")
        self._channel.notify(method, params)
