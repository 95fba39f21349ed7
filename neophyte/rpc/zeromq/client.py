"""
ZeroMQ channel binding

JSON-RPC 2.0 over a ZeroMQ DEALER socket. Notifications are sent without an
``id`` and never wait; requests carry a uuid4 ``id`` and block until the
matching reply arrives or the timeout elapses.
"""

import zmq
import json
import uuid
import time
import logging
from typing import Any, Dict, List

from opentelemetry.trace import SpanKind

from neophyte.rpc.channel_interface import ChannelInterface
from neophyte.rpc.errors import (
    ChannelClosedError,
    ChannelError,
    ProtocolError,
    RemoteError,
    RequestTimeoutError,
)
from neophyte.telemetry.tracer import create_span, inject_trace_context
from neophyte.telemetry.metrics import record_latency, increment_counter

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_ID = 1


class ZeroMQChannel(ChannelInterface):
    """
    ZeroMQ channel, JSON-RPC 2.0 notifications and requests to one host endpoint
    """

    def __init__(self,
                 address: str = "tcp://localhost:5555",
                 channel_id: int = DEFAULT_CHANNEL_ID,
                 timeout_ms: int = 5000,
                 linger_ms: int = 1000):
        """Connect a ZeroMQ channel

        Args:
            address: Host endpoint address
            channel_id: Identifier of the endpoint, fixed for the channel's lifetime
            timeout_ms: Request timeout in milliseconds
            linger_ms: How long close() waits to flush queued notifications
        """
        self.address = address
        self.timeout_ms = timeout_ms
        self._channel_id = channel_id
        self.context = zmq.Context()
        self.socket = self.context.socket(zmq.DEALER)
        self._closed = False
        self.socket.setsockopt(zmq.LINGER, linger_ms)
        try:
            self.socket.connect(address)
        except zmq.error.ZMQError as e:
            self.close()
            raise ChannelError(f"Cannot connect channel {channel_id} to {address}: {e}") from e
        logger.info(f"ZeroMQ channel {channel_id} connected to {address}")

    @property
    def channel_id(self) -> int:
        return self._channel_id

    @property
    def closed(self) -> bool:
        return self._closed

    def __del__(self):
        self.close()

    def close(self):
        """Close the socket and terminate the context"""
        if getattr(self, '_closed', True):
            return
        self._closed = True
        self.socket.close()
        self.context.term()
        logger.info(f"ZeroMQ channel {self._channel_id} closed")

    def notify(self, method: str, params: List[Any]) -> None:
        """Send a JSON-RPC 2.0 notification

        Args:
            method: Method name
            params: Ordered argument list

        Returning only means the message was queued. ZeroMQ connects
        lazily, so a notification to an address nobody is bound to still
        succeeds, and ``close()`` discards it once ``linger_ms`` elapses.

        Raises:
            ChannelClosedError: The channel was closed
            ChannelError: ZeroMQ failed to queue the message
        """
        with self._span(method):
            message = self._build_message(method, params)
            self._send(message, method)
        increment_counter("rpc.client.notifications", 1, {"method": method})

    def request(self, method: str, params: List[Any]) -> Any:
        """Send a JSON-RPC 2.0 request and wait for its reply

        Args:
            method: Method name
            params: Ordered argument list

        Returns:
            The reply's ``result`` value

        Raises:
            RequestTimeoutError: No reply within ``timeout_ms``
            ChannelClosedError: The channel was closed
            ChannelError: ZeroMQ failure
            ProtocolError: The reply is not valid JSON-RPC 2.0
            RemoteError: The host replied with an error object
        """
        with self._span(method):
            return self._call(method, params)

    def _span(self, method: str):
        return create_span(method, {
            "rpc.system": "jsonrpc",
            "rpc.method": method,
            "neophyte.channel_id": self._channel_id,
        }, kind=SpanKind.CLIENT)

    def _call(self, method: str, params: List[Any]) -> Any:
        request_id = str(uuid.uuid4())
        message = self._build_message(method, params)
        message["id"] = request_id

        start_time = time.time()
        self._send(message, method)
        increment_counter("rpc.client.requests", 1, {"method": method})

        response = self._receive(request_id, method, start_time)

        latency_ms = (time.time() - start_time) * 1000
        record_latency("rpc.client.latency", latency_ms, {"method": method})
        logger.debug(f"Reply to {method} received, latency: {latency_ms:.2f}ms")

        if "error" in response:
            error = response["error"]
            if not isinstance(error, dict):
                self._count_error("invalid_response", method)
                raise ProtocolError(f"Malformed error object in reply to {method}: {error!r}")
            logger.error(f"RPC error for {method}: {error.get('message')}, code: {error.get('code')}")
            self._count_error("rpc_error", method)
            raise RemoteError(method, error.get("code", -32603), error.get("message", ""), error.get("data"))

        if "result" not in response:
            self._count_error("invalid_response", method)
            raise ProtocolError(f"Reply to {method} has neither result nor error")

        increment_counter("rpc.client.success", 1, {"method": method})
        return response["result"]

    def _build_message(self, method: str, params: List[Any]) -> Dict[str, Any]:
        message = {
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params),
        }
        trace_context = inject_trace_context()
        if trace_context:
            message["trace_context"] = trace_context
        return message

    def _send(self, message: Dict[str, Any], method: str):
        if self._closed:
            raise ChannelClosedError(f"Channel {self._channel_id} is closed")

        payload = json.dumps(message)
        logger.debug(f"Sending on channel {self._channel_id}: {payload[:200]}")
        try:
            self.socket.send(payload.encode('utf-8'), flags=zmq.NOBLOCK)
        except zmq.error.Again:
            self._count_error("send_queue_full", method)
            raise ChannelError(f"Send queue full on channel {self._channel_id}")
        except zmq.error.ZMQError as e:
            self._count_error("zmq_error", method)
            raise ChannelError(f"ZeroMQ error on channel {self._channel_id}: {e}") from e

    def _receive(self, request_id: str, method: str, start_time: float) -> Dict[str, Any]:
        deadline = start_time + self.timeout_ms / 1000.0

        while True:
            remaining_ms = int((deadline - time.time()) * 1000)
            try:
                if remaining_ms <= 0 or not self.socket.poll(remaining_ms, zmq.POLLIN):
                    logger.error(f"Request {method} timed out after {self.timeout_ms}ms")
                    self._count_error("timeout", method)
                    raise RequestTimeoutError(method, self.timeout_ms)
                raw = self.socket.recv()
            except zmq.error.ZMQError as e:
                self._count_error("zmq_error", method)
                raise ChannelError(f"ZeroMQ error on channel {self._channel_id}: {e}") from e

            try:
                response = json.loads(raw.decode('utf-8'))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                self._count_error("invalid_response", method)
                raise ProtocolError(f"Undecodable reply to {method}: {e}") from e

            if not isinstance(response, dict) or response.get("jsonrpc") != "2.0":
                logger.error(f"Invalid JSON-RPC 2.0 reply: {response}")
                self._count_error("invalid_response", method)
                raise ProtocolError("Invalid JSON-RPC 2.0 reply")

            if response.get("id") != request_id:
                # Late reply to an earlier request that already timed out
                logger.warning(f"Discarding reply with unexpected id {response.get('id')}")
                continue

            return response

    def _count_error(self, error_type: str, method: str):
        increment_counter("rpc.client.errors", 1, {"type": error_type, "method": method})
