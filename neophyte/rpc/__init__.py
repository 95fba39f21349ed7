"""
RPC Channel Module

- channel_interface: the notify/request primitives the client facade consumes
- zeromq: JSON-RPC 2.0 over ZeroMQ binding
- factory: transport selection
"""

from .channel_interface import ChannelInterface
from .errors import (
    ChannelError,
    ChannelClosedError,
    RequestTimeoutError,
    ProtocolError,
    RemoteError,
)
from .factory import ChannelFactory, TransportType

__all__ = [
    "ChannelInterface",
    "ChannelError",
    "ChannelClosedError",
    "RequestTimeoutError",
    "ProtocolError",
    "RemoteError",
    "ChannelFactory",
    "TransportType",
]
