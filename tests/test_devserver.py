import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from coreason_render.devserver import DevServer
from coreason_render.exceptions import SessionError

URL = "http://localhost:3000/"


@pytest.fixture
def mock_process() -> Any:
    process = MagicMock()
    process.returncode = None
    process.terminate = MagicMock()
    process.kill = MagicMock()
    process.wait = AsyncMock(return_value=0)
    return process


@pytest.fixture
def mock_exec(mock_process: Any) -> Any:
    with patch("coreason_render.devserver.asyncio.create_subprocess_exec", AsyncMock(return_value=mock_process)) as mock:
        yield mock


@pytest.fixture
def mock_client() -> Any:
    client = MagicMock()
    client.get = AsyncMock(return_value=httpx.Response(200, request=httpx.Request("GET", URL)))
    with patch("coreason_render.devserver.httpx.AsyncClient") as mock_cls:
        mock_cls.return_value.__aenter__.return_value = client
        yield client


def test_command_required() -> None:
    with pytest.raises(ValueError, match="command is required"):
        DevServer(command=[], url=URL)


@pytest.mark.asyncio
async def test_start_ready(mock_exec: Any, mock_client: Any, mock_process: Any) -> None:
    server = DevServer(command=["npx", "vite"], url=URL)
    await server.start()

    assert mock_exec.await_args.args == ("npx", "vite")
    mock_client.get.assert_awaited_once()
    assert server.running


@pytest.mark.asyncio
async def test_start_waits_for_server(mock_exec: Any, mock_client: Any) -> None:
    mock_client.get.side_effect = [
        httpx.ConnectError("refused"),
        httpx.ConnectError("refused"),
        httpx.Response(404, request=httpx.Request("GET", URL)),
    ]
    server = DevServer(command=["npx", "vite"], url=URL, poll_interval=0.001)
    await server.start()
    assert mock_client.get.await_count == 3


@pytest.mark.asyncio
async def test_start_process_exits(mock_exec: Any, mock_client: Any, mock_process: Any) -> None:
    mock_process.returncode = 1
    server = DevServer(command=["npx", "vite"], url=URL)

    with pytest.raises(SessionError, match="exited during startup"):
        await server.start()
    assert server.process is None


@pytest.mark.asyncio
async def test_start_timeout(mock_exec: Any, mock_client: Any, mock_process: Any) -> None:
    mock_client.get.side_effect = httpx.ConnectError("refused")
    server = DevServer(command=["npx", "vite"], url=URL, startup_timeout=0.02, poll_interval=0.005)

    with pytest.raises(SessionError, match="did not answer"):
        await server.start()
    mock_process.terminate.assert_called_once()


@pytest.mark.asyncio
async def test_start_missing_binary() -> None:
    with patch("coreason_render.devserver.asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError("npx"))):
        with pytest.raises(SessionError, match="Failed to start dev server"):
            await DevServer(command=["npx", "vite"], url=URL).start()


@pytest.mark.asyncio
async def test_stop(mock_exec: Any, mock_client: Any, mock_process: Any) -> None:
    server = DevServer(command=["npx", "vite"], url=URL)
    await server.start()
    await server.stop()

    mock_process.terminate.assert_called_once()
    mock_process.kill.assert_not_called()
    assert server.process is None


@pytest.mark.asyncio
async def test_stop_kills_stubborn_server(mock_exec: Any, mock_client: Any, mock_process: Any) -> None:
    calls = 0

    async def wait() -> int:
        nonlocal calls
        calls += 1
        if calls == 1:
            await asyncio.sleep(10)
        return -9

    mock_process.wait = AsyncMock(side_effect=wait)
    server = DevServer(command=["npx", "vite"], url=URL)
    await server.start()
    await server.stop(grace_period=0.01)

    mock_process.kill.assert_called_once()
    assert server.process is None


@pytest.mark.asyncio
async def test_stop_when_not_running() -> None:
    server = DevServer(command=["npx", "vite"], url=URL)
    # Should not raise
    await server.stop()
