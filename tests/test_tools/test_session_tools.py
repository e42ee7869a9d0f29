"""Tests for the MCP session tools."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from tests.fakes import FakeConnection, Reply, sessions_reply
from vnc_session_mcp.config import Config, HostKeyVerifier, Settings, SSHConfigParser
from vnc_session_mcp.dependencies import Dependencies
from vnc_session_mcp.services import LoggingErrorPresenter, set_deps
from vnc_session_mcp.services.errors import ServerNotInstalled
from vnc_session_mcp.tools import (
    vnc_connect,
    vnc_hosts,
    vnc_kill,
    vnc_list,
    vnc_otp,
    vnc_start,
)

OTP_REPLY = Reply(stderr="Full control one-time password: 12345678\n")


class FakePool:
    """Connection pool handing out one scripted connection."""

    def __init__(self, conn: FakeConnection | Exception) -> None:
        self.conn = conn
        self.requested: list[str] = []
        self.removed: list[str] = []

    async def get_connection(self, host):
        self.requested.append(host.name)
        if isinstance(self.conn, Exception):
            raise self.conn
        return self.conn

    async def remove_connection(self, host_name: str) -> None:
        self.removed.append(host_name)

    async def close_all(self) -> None:
        return None


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TVNC_SERVERDIR", raising=False)
    monkeypatch.delenv("TVNC_SERVERARGS", raising=False)


@pytest.fixture
def ssh_config(tmp_path: Path) -> Path:
    path = tmp_path / "ssh_config"
    path.write_text(
        "Host tootie\n    HostName 10.0.0.5\n    User vnc\n\nHost dookie\n"
    )
    return path


@pytest.fixture
def install(ssh_config: Path) -> Iterator:
    """Install dependencies with a fake pool; returns a setup function."""

    def _install(conn: FakeConnection | Exception, auto_otp: bool = True) -> FakePool:
        pool = FakePool(conn)
        config = Config(
            settings=Settings(auto_otp=auto_otp),
            parser=SSHConfigParser(ssh_config),
            host_keys=HostKeyVerifier("none"),
        )
        set_deps(Dependencies(config=config, pool=pool))  # type: ignore[arg-type]
        return pool

    yield _install
    set_deps(None)


class TestHostTools:
    @pytest.mark.asyncio
    async def test_vnc_hosts_lists_configured_hosts(self, install) -> None:
        install(FakeConnection({}))

        result = await vnc_hosts()

        assert "tootie -> vnc@10.0.0.5:22" in result
        assert "dookie -> root@dookie:22" in result

    @pytest.mark.asyncio
    async def test_unknown_host(self, install) -> None:
        install(FakeConnection({}))

        result = await vnc_list("nowhere")

        assert result.startswith("Error: Unknown host 'nowhere'")
        assert "dookie, tootie" in result

    @pytest.mark.asyncio
    async def test_invalid_host(self, install) -> None:
        install(FakeConnection({}))

        assert (await vnc_list("a;b")).startswith("Error: Host contains")

    @pytest.mark.asyncio
    async def test_connection_failure(self, install) -> None:
        pool = install(OSError("no route to host"))

        result = await vnc_list("tootie")

        assert result == (
            "Error: Cannot connect to tootie (vnc@10.0.0.5:22): no route to host"
        )
        assert pool.removed == ["tootie"]


class TestSessionTools:
    @pytest.mark.asyncio
    async def test_vnc_list(self, install) -> None:
        install(FakeConnection({"-sessionlist": sessions_reply([":1", ":2"])}))

        result = await vnc_list("tootie")

        assert result == "TurboVNC sessions on tootie:\n  :1\n  :2"

    @pytest.mark.asyncio
    async def test_vnc_list_empty(self, install) -> None:
        install(FakeConnection({"-sessionlist": sessions_reply([])}))

        assert await vnc_list("tootie") == "No TurboVNC sessions running on tootie."

    @pytest.mark.asyncio
    async def test_vnc_list_server_error_propagates(self, install) -> None:
        install(FakeConnection({"-sessionlist": Reply(status=127)}))

        with pytest.raises(ServerNotInstalled):
            await vnc_list("tootie")

    @pytest.mark.asyncio
    async def test_vnc_start_with_otp(self, install) -> None:
        install(
            FakeConnection(
                {"-sessionstart": Reply(stdout=":3\n"), "vncpasswd": OTP_REPLY}
            )
        )

        result = await vnc_start("tootie")

        assert result == "Session :3 on tootie\nOne-time password: 12345678"

    @pytest.mark.asyncio
    async def test_vnc_start_otp_failure_is_not_fatal(self, install) -> None:
        install(
            FakeConnection(
                {"-sessionstart": Reply(stdout=":3\n"), "vncpasswd": Reply(status=1)}
            )
        )

        assert await vnc_start("tootie") == "Session :3 on tootie"

    @pytest.mark.asyncio
    async def test_vnc_start_without_otp(self, install) -> None:
        conn = FakeConnection({"-sessionstart": Reply(stdout=":3\n")})
        install(conn, auto_otp=False)

        assert await vnc_start("tootie") == "Session :3 on tootie"
        assert conn.count("vncpasswd") == 0

    @pytest.mark.asyncio
    async def test_vnc_kill(self, install) -> None:
        conn = FakeConnection({"-kill": Reply()})
        install(conn)

        result = await vnc_kill("tootie", ":1")

        assert result == "Killed TurboVNC session :1 on tootie"
        assert conn.commands == ["/opt/TurboVNC/bin/vncserver -kill :1"]

    @pytest.mark.asyncio
    async def test_vnc_kill_rejects_bad_session(self, install) -> None:
        conn = FakeConnection({})
        install(conn)

        assert (await vnc_kill("tootie", ":1;reboot")).startswith("Error:")
        assert conn.commands == []

    @pytest.mark.asyncio
    async def test_vnc_otp(self, install) -> None:
        install(FakeConnection({"vncpasswd": OTP_REPLY}))

        result = await vnc_otp("tootie", ":1")

        assert result == "One-time password for :1 on tootie: 12345678"

    @pytest.mark.asyncio
    async def test_vnc_otp_without_output(self, install) -> None:
        install(FakeConnection({"vncpasswd": Reply()}))

        assert (await vnc_otp("tootie", ":1")).startswith("Error:")


class TestVncConnect:
    @pytest.mark.asyncio
    async def test_auto_starts_on_empty_host(self, install) -> None:
        install(
            FakeConnection(
                {
                    "-sessionlist": sessions_reply([]),
                    "-sessionstart": Reply(stdout=":1\n"),
                    "vncpasswd": OTP_REPLY,
                }
            )
        )

        result = await vnc_connect("tootie")

        assert result == "Session :1 on tootie\nOne-time password: 12345678"

    @pytest.mark.asyncio
    async def test_connects_to_chosen_session(self, install) -> None:
        install(
            FakeConnection(
                {"-sessionlist": sessions_reply([":1", ":2"]), "vncpasswd": OTP_REPLY}
            ),
            auto_otp=False,
        )

        assert await vnc_connect("tootie", ["connect::2"]) == "Session :2 on tootie"

    @pytest.mark.asyncio
    async def test_cancel_reports_running_sessions(self, install) -> None:
        install(
            FakeConnection(
                {
                    "-sessionlist": [sessions_reply([":1", ":2"]), sessions_reply([":2"])],
                    "-kill": Reply(),
                }
            )
        )

        result = await vnc_connect("tootie", ["kill::1"])

        assert result == "Session selection on tootie cancelled (running sessions: :2)"

    @pytest.mark.asyncio
    async def test_fatal_error_left_to_middleware(self, install) -> None:
        install(FakeConnection({"-sessionlist": Reply(stderr="sh: not found\n", status=127)}))

        with patch.object(LoggingErrorPresenter, "present") as logged:
            with pytest.raises(ServerNotInstalled):
                await vnc_connect("tootie")

        logged.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_action(self, install) -> None:
        conn = FakeConnection({})
        install(conn)

        assert (await vnc_connect("tootie", ["launch"])).startswith("Error: Invalid action")
        assert conn.commands == []
