"""Tests for SSH connection pool."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import asyncssh
import pytest

from vnc_session_mcp.models import SSHHost
from vnc_session_mcp.services.pool import ConnectionPool


def make_conn(closed: bool = False) -> MagicMock:
    conn = MagicMock()
    conn.is_closed.return_value = closed
    conn.close = MagicMock()
    return conn


def make_host(name: str, identity_file: str | None = None) -> SSHHost:
    return SSHHost(
        name=name,
        hostname=f"{name}.local",
        user="test",
        port=2222,
        identity_file=identity_file,
    )


class TestConnectionPool:
    """Connection reuse, eviction and cleanup."""

    def test_rejects_non_positive_max_size(self) -> None:
        with pytest.raises(ValueError, match="max_size must be > 0"):
            ConnectionPool(max_size=0)

    @pytest.mark.asyncio
    async def test_reuses_open_connection(self) -> None:
        pool = ConnectionPool(idle_timeout=60, max_size=10, known_hosts=None)
        host = make_host("tootie")

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.return_value = make_conn()

            first = await pool.get_connection(host)
            second = await pool.get_connection(host)

        assert first is second
        mock_connect.assert_awaited_once()
        assert pool.pool_size == 1
        assert pool.active_hosts == ["tootie"]

        await pool.close_all()

    @pytest.mark.asyncio
    async def test_passes_host_settings_to_connect(self) -> None:
        pool = ConnectionPool(known_hosts="/tmp/known_hosts")
        host = make_host("tootie", identity_file="~/.ssh/id_ed25519")

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.return_value = make_conn()
            await pool.get_connection(host)

        mock_connect.assert_awaited_once_with(
            "tootie.local",
            port=2222,
            username="test",
            known_hosts="/tmp/known_hosts",
            client_keys=["~/.ssh/id_ed25519"],
        )

        await pool.close_all()

    @pytest.mark.asyncio
    async def test_reconnects_when_stale(self) -> None:
        pool = ConnectionPool(known_hosts=None)
        host = make_host("tootie")
        stale = make_conn(closed=True)
        fresh = make_conn()

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.side_effect = [stale, fresh]

            await pool.get_connection(host)
            conn = await pool.get_connection(host)

        assert conn is fresh
        assert mock_connect.await_count == 2

        await pool.close_all()

    @pytest.mark.asyncio
    async def test_evicts_least_recently_used(self) -> None:
        pool = ConnectionPool(max_size=2, known_hosts=None)
        conns = [make_conn(), make_conn(), make_conn()]

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.side_effect = conns

            await pool.get_connection(make_host("host1"))
            await pool.get_connection(make_host("host2"))
            pool._connections["host1"].last_used = datetime.now() + timedelta(seconds=5)

            await pool.get_connection(make_host("host3"))

        assert pool.pool_size == 2
        assert sorted(pool.active_hosts) == ["host1", "host3"]
        conns[1].close.assert_called_once()

        await pool.close_all()

    @pytest.mark.asyncio
    async def test_cleanup_closes_idle_connections(self) -> None:
        pool = ConnectionPool(idle_timeout=60, known_hosts=None)
        conn = make_conn()

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.return_value = conn
            await pool.get_connection(make_host("tootie"))

        pool._connections["tootie"].last_used = datetime.now() - timedelta(seconds=120)
        await pool._cleanup_idle()

        assert pool.pool_size == 0
        conn.close.assert_called_once()

        await pool.close_all()

    @pytest.mark.asyncio
    async def test_cleanup_keeps_recent_connections(self) -> None:
        pool = ConnectionPool(idle_timeout=60, known_hosts=None)

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.return_value = make_conn()
            await pool.get_connection(make_host("tootie"))

        await pool._cleanup_idle()

        assert pool.active_hosts == ["tootie"]

        await pool.close_all()

    @pytest.mark.asyncio
    async def test_remove_connection(self) -> None:
        pool = ConnectionPool(known_hosts=None)
        conn = make_conn()

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.return_value = conn
            await pool.get_connection(make_host("tootie"))

        await pool.remove_connection("tootie")
        await pool.remove_connection("unknown")

        assert pool.pool_size == 0
        conn.close.assert_called_once()

        await pool.close_all()

    @pytest.mark.asyncio
    async def test_close_all(self) -> None:
        pool = ConnectionPool(known_hosts=None)
        conns = [make_conn(), make_conn()]

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.side_effect = conns
            await pool.get_connection(make_host("host1"))
            await pool.get_connection(make_host("host2"))

        await pool.close_all()

        assert pool.pool_size == 0
        for conn in conns:
            conn.close.assert_called_once()


class TestHostKeyChecking:
    """Behaviour when the host key cannot be verified."""

    @pytest.mark.asyncio
    async def test_strict_mode_raises(self) -> None:
        pool = ConnectionPool(known_hosts="/tmp/known_hosts")
        error = asyncssh.HostKeyNotVerifiable("unknown key")

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.side_effect = error

            with pytest.raises(asyncssh.HostKeyNotVerifiable):
                await pool.get_connection(make_host("tootie"))

        assert pool.pool_size == 0

    @pytest.mark.asyncio
    async def test_non_strict_mode_retries_without_verification(self) -> None:
        pool = ConnectionPool(
            known_hosts="/tmp/known_hosts", strict_host_key_checking=False
        )
        conn = make_conn()

        with patch(
            "vnc_session_mcp.services.pool.asyncssh.connect", new_callable=AsyncMock
        ) as mock_connect:
            mock_connect.side_effect = [
                asyncssh.HostKeyNotVerifiable("unknown key"),
                conn,
            ]

            result = await pool.get_connection(make_host("tootie"))

        assert result is conn
        assert mock_connect.await_args_list[1].kwargs["known_hosts"] is None

        await pool.close_all()
