"""
Tests for the command line interface
"""
import os

import pytest
from unittest.mock import patch

from neophyte import cli
from neophyte.client import NeophyteClient
from neophyte.rpc.errors import RequestTimeoutError

from .conftest import RecordingChannel


@pytest.fixture
def recording():
    channel = RecordingChannel(replies={"neophyte.get_ten": 10})
    with patch("neophyte.cli.connect", return_value=NeophyteClient(channel)) as connect:
        yield channel, connect


class TestCommands:

    def test_font_height(self, recording):
        channel, _ = recording
        assert cli.main(["font-height", "14.7"]) == 0
        assert channel.notifications == [("neophyte.set_font_height", [14])]
        assert channel.closed

    def test_font_width(self, recording):
        channel, _ = recording
        assert cli.main(["font-width", "-3.2"]) == 0
        assert channel.notifications == [("neophyte.set_font_width", [-3])]

    def test_get_ten_prints_reply(self, recording, capsys):
        assert cli.main(["get-ten"]) == 0
        assert capsys.readouterr().out.strip() == "10"

    def test_options_override_config(self, recording):
        _, connect = recording
        cli.main(["--address", "tcp://10.0.0.2:7000", "--channel", "2", "--timeout-ms", "900", "get-ten"])
        config = connect.call_args[0][0]
        assert config.address == "tcp://10.0.0.2:7000"
        assert config.channel_id == 2
        assert config.timeout_ms == 900

    def test_transport_failure_exits_nonzero(self, recording):
        channel, _ = recording
        channel.replies["neophyte.get_ten"] = RequestTimeoutError("neophyte.get_ten", 100)
        assert cli.main(["get-ten"]) == 1
        assert channel.closed


class TestArguments:

    @pytest.mark.parametrize("value", ["nan", "inf", "tall"])
    def test_rejects_non_finite_values(self, value):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["font-height", value])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestStartupFailures:
    """Failures before any message is sent"""

    def test_malformed_address_exits_nonzero(self, caplog):
        assert cli.main(["--address", "not-an-endpoint", "get-ten"]) == 1
        assert "Cannot open channel to not-an-endpoint" in caplog.text

    def test_invalid_environment_exits_nonzero(self, caplog):
        with patch.dict(os.environ, {"NEOPHYTE_TIMEOUT_MS": "soon"}):
            assert cli.main(["get-ten"]) == 1
        assert "NEOPHYTE_TIMEOUT_MS must be an integer" in caplog.text
