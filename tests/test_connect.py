"""
Tests for building a client from configuration
"""
import os
from unittest.mock import patch

import neophyte
from neophyte import ChannelConfig, NeophyteClient, connect
from neophyte.rpc.zeromq import ZeroMQEndpoint


def test_connect_wires_channel_from_config():
    endpoint = ZeroMQEndpoint(bind_address="tcp://127.0.0.1:*", poll_interval_ms=20)
    endpoint.register_method("neophyte.get_ten", lambda params: 10)
    endpoint.start(threaded=True)
    try:
        client = connect(ChannelConfig(address=endpoint.bound_address, channel_id=4, timeout_ms=2000))
        try:
            assert isinstance(client, NeophyteClient)
            assert client.channel.channel_id == 4
            assert client.get_ten() == 10
        finally:
            client.channel.close()
    finally:
        endpoint.close()


def test_connect_reads_environment():
    with patch.dict(os.environ, {"NEOPHYTE_CHANNEL": "9", "NEOPHYTE_TIMEOUT_MS": "50"}):
        client = connect()
    try:
        assert client.channel.channel_id == 9
        assert client.channel.timeout_ms == 50
    finally:
        client.channel.close()


def test_connect_sets_up_metrics_when_enabled():
    with patch("neophyte.telemetry.metrics.setup_metrics") as setup_metrics:
        client = connect(ChannelConfig(enable_metrics=True, service_name="neophyte.test"))
        client.channel.close()
    setup_metrics.assert_called_once_with("neophyte.test", otlp_endpoint="localhost:4317")


def test_connect_sets_up_tracing_when_enabled():
    with patch("neophyte.telemetry.tracer.setup_tracer") as setup_tracer, \
            patch("neophyte.telemetry.metrics.setup_metrics") as setup_metrics:
        client = connect(ChannelConfig(enable_tracing=True, otlp_endpoint="collector:4317"))
        client.channel.close()
    setup_tracer.assert_called_once_with("neophyte", otlp_endpoint="collector:4317")
    setup_metrics.assert_not_called()


def test_version():
    assert neophyte.__version__ == "0.1.0"
