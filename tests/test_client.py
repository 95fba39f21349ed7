"""
Tests for the client facade
"""
import math
from decimal import Decimal

import pytest

from neophyte.client import NeophyteClient
from neophyte.rpc.errors import ChannelError, RequestTimeoutError

from .conftest import RecordingChannel


@pytest.fixture
def client(channel):
    return NeophyteClient(channel)


class TestFontSetters:
    """Notifications sent by the setters"""

    def test_font_height_truncates(self, client, channel):
        assert client.set_font_height(12.999) is None
        assert channel.notifications == [("neophyte.set_font_height", [12])]
        assert channel.requests == []

    def test_font_width_truncates(self, client, channel):
        assert client.set_font_width(0.4) is None
        assert channel.notifications == [("neophyte.set_font_width", [0])]

    @pytest.mark.parametrize("value, expected", [
        (12.9, 12),
        (-3.2, -3),
        (-0.7, 0),
        (7, 7),
        (Decimal("15.5"), 15),
    ])
    def test_truncates_toward_zero(self, client, channel, value, expected):
        client.set_font_height(value)
        method, params = channel.notifications[-1]
        assert params == [expected]
        assert type(params[0]) is int

    def test_each_call_sends_fresh_arguments(self, client, channel):
        client.set_font_height(10.5)
        client.set_font_height(11.5)
        first, second = channel.notifications
        assert first[1] == [10]
        assert second[1] == [11]
        assert first[1] is not second[1]

    @pytest.mark.parametrize("value, error", [
        (math.nan, ValueError),
        (math.inf, OverflowError),
        ("12", TypeError),
    ])
    def test_untruncatable_input_sends_nothing(self, client, channel, value, error):
        with pytest.raises(error):
            client.set_font_width(value)
        assert channel.notifications == []


class TestGetTen:
    """Requests sent by get_ten"""

    def test_returns_reply(self, client, channel):
        assert client.get_ten() == 10
        assert channel.requests == [("neophyte.get_ten", [])]
        assert channel.notifications == []

    def test_returns_reply_unmodified(self):
        reply = {"not": "ten"}
        client = NeophyteClient(RecordingChannel(replies={"neophyte.get_ten": reply}))
        assert client.get_ten() is reply


class TestErrorPropagation:
    """Transport errors reach the caller unchanged"""

    def test_request_timeout_propagates(self):
        error = RequestTimeoutError("neophyte.get_ten", 100)
        client = NeophyteClient(RecordingChannel(replies={"neophyte.get_ten": error}))
        with pytest.raises(RequestTimeoutError) as excinfo:
            client.get_ten()
        assert excinfo.value is error

    def test_notify_failure_propagates(self, channel):
        def fail(method, params):
            raise ChannelError("unreachable")

        channel.notify = fail
        with pytest.raises(ChannelError, match="unreachable"):
            NeophyteClient(channel).set_font_height(12.0)


def test_channel_is_the_injected_one(channel):
    assert NeophyteClient(channel).channel is channel
