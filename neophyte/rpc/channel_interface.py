"""
Channel interface

Defines the two primitives every channel binding offers the client facade:
one-way notifications and two-way requests. Swapping the binding leaves
callers of the facade untouched.
"""

import abc
from typing import Any, List


class ChannelInterface(abc.ABC):
    """Channel interface, the methods every channel binding must implement"""

    @property
    @abc.abstractmethod
    def channel_id(self) -> int:
        """Opaque identifier of the RPC endpoint this channel addresses"""
        pass

    @abc.abstractmethod
    def notify(self, method: str, params: List[Any]) -> None:
        """Send a notification without waiting for a reply

        Args:
            method: Method name
            params: Ordered argument list

        Raises:
            ConnectionError: The message could not be sent
        """
        pass

    @abc.abstractmethod
    def request(self, method: str, params: List[Any]) -> Any:
        """Send a request and block until its reply arrives

        Args:
            method: Method name
            params: Ordered argument list

        Returns:
            The ``result`` value of the reply, unmodified

        Raises:
            TimeoutError: No reply within the channel timeout
            ConnectionError: The message could not be sent
            ValueError: The reply is malformed
        """
        pass

    @abc.abstractmethod
    def close(self) -> None:
        """Close the channel and release its resources"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
