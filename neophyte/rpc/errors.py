"""
Channel error types

Failures raised by channel bindings. Each error subclasses the builtin a
caller would naturally catch, so code written against plain
``ConnectionError``/``TimeoutError`` keeps working.
"""

from typing import Any, Optional


class ChannelError(ConnectionError):
    """Raised when the underlying transport cannot deliver a message."""


class ChannelClosedError(ChannelError):
    """Raised when a message is sent on a channel that was already closed."""


class RequestTimeoutError(TimeoutError):
    """Raised when no reply arrives for a request within the channel timeout."""

    def __init__(self, method: str, timeout_ms: int):
        super().__init__(f"Request {method} timed out after {timeout_ms}ms")
        self.method = method
        self.timeout_ms = timeout_ms


class ProtocolError(ValueError):
    """Raised when a reply is not a valid JSON-RPC 2.0 response."""


class RemoteError(RuntimeError):
    """Raised when the host answers a request with a JSON-RPC error object."""

    def __init__(self, method: str, code: int, message: str, data: Optional[Any] = None):
        super().__init__(f"{method} failed with code {code}: {message}")
        self.method = method
        self.code = code
        self.message = message
        self.data = data
