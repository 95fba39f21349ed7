"""
neophyte

Client for driving the neophyte host over an RPC channel: set the font
height and width, and query the host.
"""

import logging
from typing import Optional

from neophyte.client import NeophyteClient
from neophyte.config import ChannelConfig
from neophyte.rpc.factory import ChannelFactory

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def connect(config: Optional[ChannelConfig] = None) -> NeophyteClient:
    """Open a channel described by ``config`` and wrap it in a client

    Args:
        config: Channel configuration, read from the environment when omitted

    Returns:
        NeophyteClient: Client bound to the new channel
    """
    if config is None:
        config = ChannelConfig.from_env()

    if config.enable_metrics:
        from neophyte.telemetry.metrics import setup_metrics
        setup_metrics(config.service_name, otlp_endpoint=config.otlp_endpoint)

    if config.enable_tracing:
        from neophyte.telemetry.tracer import setup_tracer
        setup_tracer(config.service_name, otlp_endpoint=config.otlp_endpoint)

    channel = ChannelFactory.create_channel(config.transport, config.to_dict())
    logger.debug(f"Client connected over {config.transport.value} channel {channel.channel_id}")
    return NeophyteClient(channel)


__all__ = ["NeophyteClient", "ChannelConfig", "connect", "__version__"]
