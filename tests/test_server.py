"""
Book API — Server Startup Tests
===============================

What:  Tests for serve(), BookAPIServer and the listen-address log line.
How:   uvicorn's own startup and run are patched out; no socket is opened.

What we test:
    ✅ The address is logged only after uvicorn reports a successful start
    ✅ The logged port is the bound one, not the configured one
    ✅ serve() reuses the module-level app for the default settings
"""

import logging
import socket
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import uvicorn

from bookapi import main
from bookapi.config import Settings


def _fake_socket(port, family=socket.AF_INET):
    sock = MagicMock()
    sock.family = family
    sock.getsockname.return_value = ("127.0.0.1", port)
    return sock


class TestBoundPorts:

    def test_ports_from_tcp_sockets(self):
        servers = [SimpleNamespace(sockets=[_fake_socket(54321), _fake_socket(54321, socket.AF_INET6)])]
        assert main.bound_ports(servers) == [54321]

    def test_unix_sockets_skipped(self):
        unix = _fake_socket(0, family=getattr(socket, "AF_UNIX", -1))
        assert main.bound_ports([SimpleNamespace(sockets=[unix])]) == []

    def test_no_servers(self):
        assert main.bound_ports([]) == []


class TestBookAPIServerStartup:

    def _server(self):
        return main.BookAPIServer(uvicorn.Config(main.app, port=3000), docs_path="/docs")

    @pytest.mark.asyncio
    async def test_logs_bound_port_after_successful_start(self, caplog):
        server = self._server()

        async def started(self, sockets=None):
            self.started = True
            self.servers = [SimpleNamespace(sockets=[_fake_socket(40123)])]

        with patch.object(uvicorn.Server, "startup", started), \
             caplog.at_level(logging.INFO, logger="bookapi.main"):
            await server.startup()

        assert "Server running at http://localhost:40123" in caplog.text
        assert "API docs: http://localhost:40123/docs" in caplog.text
        assert "localhost:3000" not in caplog.text

    @pytest.mark.asyncio
    async def test_nothing_logged_when_start_fails(self, caplog):
        server = self._server()

        async def not_started(self, sockets=None):
            self.should_exit = True

        with patch.object(uvicorn.Server, "startup", not_started), \
             caplog.at_level(logging.INFO, logger="bookapi.main"):
            await server.startup()

        assert "Server running at" not in caplog.text

    @pytest.mark.asyncio
    async def test_bind_error_propagates_without_log(self, caplog):
        server = self._server()

        async def bind_failure(self, sockets=None):
            raise SystemExit(1)

        with patch.object(uvicorn.Server, "startup", bind_failure), \
             caplog.at_level(logging.INFO, logger="bookapi.main"):
            with pytest.raises(SystemExit):
                await server.startup()

        assert "Server running at" not in caplog.text


class TestServe:

    def test_default_settings_reuse_module_app(self):
        with patch.object(main, "BookAPIServer") as server_cls, \
             patch.object(main, "create_app") as create_app:
            main.serve()

        create_app.assert_not_called()
        config = server_cls.call_args.args[0]
        assert config.app is main.app
        assert config.port == main.settings.port
        server_cls.return_value.run.assert_called_once()

    def test_custom_settings_build_their_own_app(self):
        custom = Settings(_env_file=None, port=4321, docs_path="/api-docs", log_level="WARNING")
        with patch.object(main, "BookAPIServer") as server_cls, \
             patch.object(main, "create_app") as create_app, \
             patch.object(main, "setup_logging") as setup_logging:
            main.serve(custom)

        setup_logging.assert_called_once_with("WARNING")
        create_app.assert_called_once_with(custom)
        config = server_cls.call_args.args[0]
        assert config.app is create_app.return_value
        assert config.port == 4321
        assert server_cls.call_args.kwargs["docs_path"] == "/api-docs"


class TestLifespan:

    @pytest.mark.asyncio
    async def test_lifespan_does_not_announce_address(self, caplog):
        with caplog.at_level(logging.INFO, logger="bookapi.main"):
            async with main.lifespan(main.app):
                pass
        assert "Server running at" not in caplog.text
        assert "starting up" in caplog.text
        assert "shutting down" in caplog.text
