"""
Shared fixtures
"""
import pytest

from neophyte.rpc.channel_interface import ChannelInterface


class RecordingChannel(ChannelInterface):
    """Channel double that records every call and answers requests from a table"""

    def __init__(self, replies=None, channel_id: int = 1):
        self._channel_id = channel_id
        self.replies = dict(replies or {})
        self.notifications = []
        self.requests = []
        self.closed = False

    @property
    def channel_id(self) -> int:
        return self._channel_id

    def notify(self, method, params):
        self.notifications.append((method, params))

    def request(self, method, params):
        self.requests.append((method, params))
        reply = self.replies[method]
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def close(self):
        self.closed = True


@pytest.fixture
def channel():
    return RecordingChannel(replies={"neophyte.get_ten": 10})
