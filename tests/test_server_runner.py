"""Tests for the server runner's port handling."""

import socket

import pytest
from fastapi import FastAPI

from ggmcp.config.models import GgmcpConfig, PortRangeConfig, ServerConfig
from ggmcp.server.ports import PortRange, PortUnavailableError
from ggmcp.server.runner import PortBindError, ServerRunner, bind_socket


@pytest.fixture
def app():
    return FastAPI()


@pytest.fixture
def held_port():
    holder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    holder.bind(("127.0.0.1", 0))
    holder.listen(1)
    yield holder.getsockname()[1]
    holder.close()


class TestAllocatePort:
    def test_fixed_port_skips_scanning(self, app, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("range should not be scanned")

        monkeypatch.setattr("ggmcp.server.runner.find_available_port", fail)

        runner = ServerRunner(app, port=9975)
        assert runner.allocate_port() == 9975

    def test_scans_range(self, app, monkeypatch):
        calls = []

        def fake_find(port_range, timeout, host):
            calls.append((port_range, timeout, host))
            return 9962

        monkeypatch.setattr("ggmcp.server.runner.find_available_port", fake_find)

        runner = ServerRunner(app, port_range=PortRange(9960, 9970), probe_timeout=0.5)

        assert runner.allocate_port() == 9962
        assert calls == [(PortRange(9960, 9970), 0.5, "127.0.0.1")]

    def test_exhausted_range_is_fatal(self, app, monkeypatch):
        monkeypatch.setattr(
            "ggmcp.server.runner.find_available_port", lambda *a, **kw: None
        )
        runner = ServerRunner(app, port_range=PortRange(9960, 9961))

        with pytest.raises(PortUnavailableError, match="9960-9961"):
            runner.allocate_port()


class TestListen:
    def test_binds_allocated_port(self, app):
        runner = ServerRunner(app, port=0)
        sock = runner.listen()
        try:
            assert runner.port == sock.getsockname()[1]
            assert runner.port > 0
            assert runner.url == f"http://127.0.0.1:{runner.port}"
        finally:
            sock.close()

    def test_bind_race_is_fatal(self, app, held_port):
        runner = ServerRunner(app, port=held_port)

        with pytest.raises(PortBindError):
            runner.listen()
        assert runner.port is None

    def test_bind_socket_error(self, held_port):
        with pytest.raises(PortBindError, match=str(held_port)):
            bind_socket("127.0.0.1", held_port)

    @pytest.mark.parametrize("port", [70000, -1])
    def test_bind_socket_out_of_range(self, port):
        with pytest.raises(PortBindError, match=f"127.0.0.1:{port}"):
            bind_socket("127.0.0.1", port)


class TestFromConfig:
    def test_uses_config_values(self, app):
        config = GgmcpConfig(
            server=ServerConfig(
                host="127.0.0.1",
                port_range=PortRangeConfig(start=9000, end=9005),
                probe_timeout=0.2,
            )
        )

        runner = ServerRunner.from_config(app, config)

        assert runner._port_range == PortRange(9000, 9005)
        assert runner._probe_timeout == 0.2
        assert runner._fixed_port is None
        assert runner.port is None
