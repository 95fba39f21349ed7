"""
ZeroMQ Binding Package

JSON-RPC 2.0 over ZeroMQ: the client-side channel (DEALER) and the host-side
endpoint (ROUTER) it talks to.
"""

from neophyte.rpc.zeromq.client import ZeroMQChannel
from neophyte.rpc.zeromq.server import ZeroMQEndpoint

__all__ = ["ZeroMQChannel", "ZeroMQEndpoint"]
