"""Tests for server wiring: tools, health route and lifespan."""

import logging
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError
from starlette.testclient import TestClient

from ping_runner.config import Settings
from ping_runner.services import set_settings


@pytest.fixture
def settings(fake_ping: Path) -> Settings:
    settings = Settings(command=str(fake_ping), count=1)
    set_settings(settings)
    return settings


class TestHealthCheck:
    """Tests for health check endpoint."""

    @pytest.fixture
    def client(self, settings: Settings) -> TestClient:
        """Create test client for HTTP server."""
        from ping_runner.server import create_server

        return TestClient(create_server().http_app())

    def test_health_returns_ok(self, client: Any) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.text == "OK"
        assert "text/plain" in response.headers["content-type"]


@pytest.mark.asyncio
async def test_lists_ping_tools(settings: Settings) -> None:
    from ping_runner.server import create_server

    async with Client(create_server()) as client:
        tools = await client.list_tools()

    assert {tool.name for tool in tools} == {"ping", "ping_hosts"}


@pytest.mark.asyncio
async def test_ping_tool_call(settings: Settings) -> None:
    from ping_runner.server import create_server

    async with Client(create_server()) as client:
        result = await client.call_tool("ping", {"host": "localhost"})

    text = result.content[0].text
    assert "64 bytes from localhost" in text
    assert text.endswith("─── exit code 0 ───")


@pytest.mark.asyncio
async def test_lifespan_releases_runner(settings: Settings) -> None:
    from ping_runner.server import app_lifespan, create_server
    from ping_runner.services import state

    async with app_lifespan(create_server()) as context:
        assert context == {"command": settings.command}
        assert state._runner is not None

    assert state._runner is None


@pytest.mark.asyncio
async def test_launch_fault_surfaces_as_tool_error(tmp_path: Path) -> None:
    from ping_runner.server import create_server

    set_settings(Settings(command=str(tmp_path / "missing")))
    middleware_logger = logging.getLogger("ping_runner.middleware.base")

    with patch.object(middleware_logger, "log") as mock_log:
        async with Client(create_server()) as client:
            with pytest.raises(ToolError, match="Failed to launch"):
                await client.call_tool("ping", {"host": "localhost"})

    assert any(call.args[0] == logging.ERROR for call in mock_log.call_args_list)
