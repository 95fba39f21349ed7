"""
ZeroMQ host endpoint

The receiving side of a ZeroMQ channel. Binds a ROUTER socket, decodes
JSON-RPC 2.0 messages and dispatches them to registered handlers:
notifications run the handler and send nothing back, requests are answered
with the handler's result or a JSON-RPC error object.

Once started, the serving thread owns the socket and is the one to close it.
"""

import zmq
import json
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from opentelemetry.trace import SpanKind

from neophyte.rpc.errors import ChannelError
from neophyte.telemetry.tracer import create_span, extract_trace_context, with_trace_context
from neophyte.telemetry.metrics import record_latency, increment_counter

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603

Handler = Callable[[List[Any]], Any]


class ZeroMQEndpoint:
    """
    ZeroMQ host endpoint, dispatches JSON-RPC 2.0 notifications and requests
    """

    def __init__(self,
                 bind_address: str = "tcp://*:5555",
                 poll_interval_ms: int = 100,
                 join_timeout: float = 1.0):
        """Bind the endpoint

        Args:
            bind_address: ROUTER socket bind address, ``tcp://host:*`` picks a free port
            poll_interval_ms: How often the loop checks whether it should stop
            join_timeout: How long stop() waits for the serving thread, in seconds
        """
        self.methods: Dict[str, Handler] = {}
        self.running = False
        self.poll_interval_ms = poll_interval_ms
        self.join_timeout = join_timeout
        self.server_thread: Optional[threading.Thread] = None
        self._close_requested = False
        self._serving = False
        self._release_lock = threading.Lock()
        self.context = zmq.Context()
        self.socket = self.context.socket(zmq.ROUTER)
        self.socket.setsockopt(zmq.LINGER, 0)
        try:
            self.socket.bind(bind_address)
        except zmq.error.ZMQError as e:
            self._release()
            raise ChannelError(f"Cannot bind endpoint to {bind_address}: {e}") from e
        self.bound_address = self.socket.getsockopt_string(zmq.LAST_ENDPOINT)

        logger.info(f"ZeroMQ endpoint bound to {self.bound_address}")

    def __del__(self):
        self.close()

    @property
    def closed(self) -> bool:
        return self.socket.closed

    def register_method(self, name: str, handler: Handler):
        """Register a handler for notifications and requests named ``name``

        Args:
            name: Method name
            handler: Receives the params list, returns the reply result
        """
        self.methods[name] = handler
        logger.debug(f"Registered RPC method: {name}")

    def start(self, threaded: bool = True):
        """Start serving

        Args:
            threaded: Run the loop in a background thread
        """
        self.running = True
        self._serving = True
        increment_counter("rpc.server.started", 1)

        if threaded:
            self.server_thread = threading.Thread(target=self._run_server, daemon=True)
            self.server_thread.start()
            logger.info("ZeroMQ endpoint started in background thread")
        else:
            logger.info("ZeroMQ endpoint started in main thread")
            self._run_server()

    def stop(self):
        """Stop the loop and wait up to ``join_timeout`` for the background thread"""
        self.running = False
        if self.server_thread is None:
            return
        self.server_thread.join(timeout=self.join_timeout)
        if self.server_thread.is_alive():
            logger.warning("ZeroMQ endpoint thread still busy in a handler, it will exit after it")
            return
        self.server_thread = None
        logger.info("ZeroMQ endpoint stopped")

    def close(self):
        """Stop serving and release the socket

        While the loop is still running, for example in a handler that
        outlives ``join_timeout``, the serving thread releases the socket
        itself once the loop exits.
        """
        if not hasattr(self, 'socket'):
            return
        self._close_requested = True
        self.stop()
        if not self._serving:
            self._release()

    def _release(self):
        with self._release_lock:
            if self.socket.closed:
                return
            self.socket.close()
            self.context.term()

    def _run_server(self):
        logger.info("ZeroMQ endpoint accepting messages")
        try:
            self._serve()
        finally:
            self._serving = False
            if self._close_requested:
                self._release()

    def _serve(self):
        while self.running:
            try:
                if not self.socket.poll(self.poll_interval_ms, zmq.POLLIN):
                    continue
                identity, payload = self.socket.recv_multipart()
            except zmq.error.ZMQError as e:
                logger.error(f"Error in endpoint loop: {e}")
                increment_counter("rpc.server.errors", 1, {"type": "loop_error"})
                time.sleep(self.poll_interval_ms / 1000.0)
                continue
            except ValueError:
                logger.error("Dropping message with unexpected frame count")
                increment_counter("rpc.server.errors", 1, {"type": "framing_error"})
                continue

            start_time = time.time()
            increment_counter("rpc.server.requests.received", 1)

            response = self.handle_message(payload)
            if response is None:
                continue

            try:
                self.socket.send_multipart([identity, json.dumps(response).encode('utf-8')])
            except zmq.error.ZMQError as e:
                logger.error(f"Failed to send reply: {e}")
                increment_counter("rpc.server.errors", 1, {"type": "send_error"})
                continue

            latency_ms = (time.time() - start_time) * 1000
            record_latency("rpc.server.request.latency", latency_ms)
            logger.debug(f"Reply sent, took {latency_ms:.2f}ms")

    def handle_message(self, payload: bytes) -> Optional[Dict[str, Any]]:
        """Decode and dispatch one message

        A message without an ``id`` member is a notification; ``"id": null``
        is still a request and gets a reply.

        Args:
            payload: Raw JSON-RPC 2.0 frame

        Returns:
            Dict: JSON-RPC response object, or None for notifications
        """
        try:
            message = json.loads(payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"JSON parse error: {e}")
            increment_counter("rpc.server.errors", 1, {"type": "parse_error"})
            return _error_response(None, PARSE_ERROR, "Parse error")

        if not isinstance(message, dict) or message.get("jsonrpc") != "2.0":
            increment_counter("rpc.server.errors", 1, {"type": "invalid_request"})
            request_id = message.get("id") if isinstance(message, dict) else None
            return _error_response(request_id, INVALID_REQUEST,
                                   "Invalid Request: Not a valid JSON-RPC 2.0 request")

        is_notification = "id" not in message
        request_id = message.get("id")
        method_name = message.get("method")
        params = message.get("params", [])

        if not isinstance(method_name, str) or not isinstance(params, list):
            increment_counter("rpc.server.errors", 1, {"type": "invalid_request"})
            if is_notification:
                logger.warning(f"Dropping malformed notification: {message}")
                return None
            return _error_response(request_id, INVALID_REQUEST,
                                   "Invalid Request: method must be a string and params a list")

        handler = self.methods.get(method_name)
        if handler is None:
            increment_counter("rpc.server.errors", 1, {"type": "method_not_found", "method": method_name})
            if is_notification:
                logger.warning(f"No handler for notification {method_name}")
                return None
            return _error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method_name}")

        trace_context = extract_trace_context(message.get("trace_context"))

        try:
            with with_trace_context(trace_context), \
                    create_span(method_name, {"rpc.system": "jsonrpc", "rpc.method": method_name},
                                kind=SpanKind.SERVER):
                increment_counter("rpc.server.method.calls", 1, {"method": method_name})
                result = handler(params)
            # The result has to survive encoding before it is acknowledged
            json.dumps(result)
        except Exception as e:
            logger.error(f"Error executing method {method_name}: {e}")
            increment_counter("rpc.server.method.errors", 1, {"method": method_name})
            if is_notification:
                return None
            return _error_response(request_id, INTERNAL_ERROR, f"Internal error: {e}")

        if is_notification:
            increment_counter("rpc.server.notifications", 1, {"method": method_name})
            return None

        return {
            "jsonrpc": "2.0",
            "result": result,
            "id": request_id
        }


def _error_response(request_id, code: int, message: str) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "error": {
            "code": code,
            "message": message
        },
        "id": request_id
    }
