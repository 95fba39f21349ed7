"""
Configuration settings for neophyte channels
"""
import os
from dataclasses import dataclass
from typing import Any, Dict

from neophyte.rpc.factory import TransportType
from neophyte.rpc.zeromq.client import DEFAULT_CHANNEL_ID


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ChannelConfig:
    """Where and how to reach the host"""
    transport: TransportType = TransportType.ZEROMQ
    address: str = "tcp://localhost:5555"
    bind_address: str = "tcp://*:5555"
    channel_id: int = DEFAULT_CHANNEL_ID
    timeout_ms: int = 5000

    # Telemetry
    enable_metrics: bool = False
    enable_tracing: bool = False
    service_name: str = "neophyte"
    otlp_endpoint: str = "localhost:4317"

    @classmethod
    def from_env(cls) -> "ChannelConfig":
        """Create config from environment variables"""
        defaults = cls()
        return cls(
            transport=TransportType.parse(os.getenv("NEOPHYTE_TRANSPORT", defaults.transport.value)),
            address=os.getenv("NEOPHYTE_ADDRESS", defaults.address),
            bind_address=os.getenv("NEOPHYTE_BIND_ADDRESS", defaults.bind_address),
            channel_id=_env_int("NEOPHYTE_CHANNEL", defaults.channel_id),
            timeout_ms=_env_int("NEOPHYTE_TIMEOUT_MS", defaults.timeout_ms),
            enable_metrics=_env_bool("NEOPHYTE_ENABLE_METRICS", defaults.enable_metrics),
            enable_tracing=_env_bool("NEOPHYTE_ENABLE_TRACING", defaults.enable_tracing),
            service_name=os.getenv("NEOPHYTE_SERVICE_NAME", defaults.service_name),
            otlp_endpoint=os.getenv("NEOPHYTE_OTLP_ENDPOINT", defaults.otlp_endpoint),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the mapping the channel factory expects"""
        return {
            "transport": self.transport.value,
            "address": self.address,
            "bind_address": self.bind_address,
            "channel_id": self.channel_id,
            "timeout_ms": self.timeout_ms,
            "enable_metrics": self.enable_metrics,
            "enable_tracing": self.enable_tracing,
            "service_name": self.service_name,
            "otlp_endpoint": self.otlp_endpoint,
        }
