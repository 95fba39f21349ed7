"""
Channel factory

Creates channels and host endpoints from a transport name and a config
mapping, so callers pick a binding at runtime.
"""

from enum import Enum
from typing import Dict, Any, Union

from neophyte.rpc.channel_interface import ChannelInterface
from neophyte.rpc.zeromq.client import ZeroMQChannel, DEFAULT_CHANNEL_ID
from neophyte.rpc.zeromq.server import ZeroMQEndpoint


class TransportType(Enum):
    """Supported channel transports"""
    ZEROMQ = "zeromq"

    @classmethod
    def parse(cls, value: Union[str, "TransportType"]) -> "TransportType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Invalid transport type: {value}") from None


class ChannelFactory:
    """Factory for channel and endpoint instances"""

    @staticmethod
    def create_channel(transport: Union[str, TransportType],
                       config: Dict[str, Any] = None) -> ChannelInterface:
        """Create a client channel

        Args:
            transport: Transport type, e.g. "zeromq"
            config: Transport configuration

        Returns:
            ChannelInterface: Connected channel

        Raises:
            ValueError: Invalid transport type
        """
        if config is None:
            config = {}

        if TransportType.parse(transport) is TransportType.ZEROMQ:
            return ZeroMQChannel(
                address=config.get("address", "tcp://localhost:5555"),
                channel_id=config.get("channel_id", DEFAULT_CHANNEL_ID),
                timeout_ms=config.get("timeout_ms", 5000)
            )
        raise ValueError(f"Invalid transport type: {transport}")

    @staticmethod
    def create_endpoint(transport: Union[str, TransportType],
                        config: Dict[str, Any] = None) -> ZeroMQEndpoint:
        """Create a host endpoint

        Args:
            transport: Transport type, e.g. "zeromq"
            config: Transport configuration

        Returns:
            ZeroMQEndpoint: Bound, not yet started endpoint

        Raises:
            ValueError: Invalid transport type
        """
        if config is None:
            config = {}

        if TransportType.parse(transport) is TransportType.ZEROMQ:
            return ZeroMQEndpoint(bind_address=config.get("bind_address", "tcp://*:5555"))
        raise ValueError(f"Invalid transport type: {transport}")
