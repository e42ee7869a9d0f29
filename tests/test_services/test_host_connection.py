"""Tests for opening host connections."""

from unittest.mock import AsyncMock, MagicMock

import asyncssh
import pytest

from vnc_session_mcp.models import SSHHost
from vnc_session_mcp.services.connection import (
    HostConnectionError,
    open_host_connection,
)


@pytest.fixture
def mock_pool() -> MagicMock:
    """Mock connection pool."""
    pool = MagicMock()
    pool.remove_connection = AsyncMock()
    return pool


@pytest.fixture
def ssh_host() -> SSHHost:
    return SSHHost(name="tootie", hostname="10.0.0.5", user="vnc")


class TestOpenHostConnection:
    @pytest.mark.asyncio
    async def test_uses_pooled_connection(
        self, mock_pool: MagicMock, ssh_host: SSHHost
    ) -> None:
        conn = MagicMock()
        mock_pool.get_connection = AsyncMock(return_value=conn)

        assert await open_host_connection(mock_pool, ssh_host) is conn

        mock_pool.get_connection.assert_awaited_once_with(ssh_host)
        mock_pool.remove_connection.assert_not_called()

    @pytest.mark.asyncio
    async def test_reconnects_after_transport_error(
        self, mock_pool: MagicMock, ssh_host: SSHHost
    ) -> None:
        conn = MagicMock()
        mock_pool.get_connection = AsyncMock(
            side_effect=[asyncssh.ConnectionLost("dropped"), conn]
        )

        assert await open_host_connection(mock_pool, ssh_host) is conn

        assert mock_pool.get_connection.await_count == 2
        mock_pool.remove_connection.assert_awaited_once_with("tootie")

    @pytest.mark.asyncio
    async def test_gives_up_after_second_failure(
        self, mock_pool: MagicMock, ssh_host: SSHHost
    ) -> None:
        mock_pool.get_connection = AsyncMock(
            side_effect=[OSError("refused"), OSError("no route to host")]
        )

        with pytest.raises(HostConnectionError) as exc_info:
            await open_host_connection(mock_pool, ssh_host)

        error = exc_info.value
        assert error.host_name == "tootie"
        assert error.address == "vnc@10.0.0.5:22"
        assert str(error.original_error) == "no route to host"
        assert str(error) == "Cannot connect to tootie (vnc@10.0.0.5:22): no route to host"

    @pytest.mark.asyncio
    async def test_non_transport_errors_are_not_retried(
        self, mock_pool: MagicMock, ssh_host: SSHHost
    ) -> None:
        mock_pool.get_connection = AsyncMock(side_effect=ValueError("bad host"))

        with pytest.raises(ValueError):
            await open_host_connection(mock_pool, ssh_host)

        mock_pool.remove_connection.assert_not_called()
