"""Shared fixtures: a fake switch standing in for asyncssh."""

import asyncio
from collections.abc import Iterator
from unittest.mock import patch

import pytest
import pytest_asyncio

from switch_mcp.config import Settings
from switch_mcp.models import TargetIdentity
from switch_mcp.services.pool import SessionPool

HUAWEI_VERSION = (
    "Huawei Versatile Routing Platform Software\r\n"
    "VRP (R) software, Version 5.170 (S5720 V200R011C10SPC500)"
)
H3C_VERSION = "H3C Comware Software, Version 7.1.070, Release 6615P05"
CISCO_VERSION = "Cisco IOS Software, C2960X Software (C2960X-UNIVERSALK9-M)"


class FakeStdout:
    """Async reader fed by the fake device."""

    def __init__(self) -> None:
        self._chunks: asyncio.Queue[str | None] = asyncio.Queue()

    def feed(self, chunk: str) -> None:
        self._chunks.put_nowait(chunk)

    def feed_eof(self) -> None:
        self._chunks.put_nowait(None)

    async def read(self, n: int = -1) -> str:
        chunk = await self._chunks.get()
        if chunk is None:
            self._chunks.put_nowait(None)
            return ""
        return chunk


class FakeStdin:
    """Line-buffered writer that hands complete lines to the device."""

    def __init__(self, connection: "FakeConnection") -> None:
        self._connection = connection
        self._buffer = ""

    def write(self, data: str) -> None:
        if self._connection.closed:
            raise BrokenPipeError("channel closed")
        self._buffer += data
        while "\n" in self._buffer:
            line, self._buffer = self._buffer.split("\n", 1)
            self._connection.handle_line(line)

    async def drain(self) -> None:
        return None


class FakeProcess:
    """Stand-in for asyncssh.SSHClientProcess."""

    def __init__(self, connection: "FakeConnection") -> None:
        self.stdin = FakeStdin(connection)
        self.stdout = FakeStdout()
        self._connection = connection

    def close(self) -> None:
        self._connection.close()


class FakeConnection:
    """Stand-in for asyncssh.SSHClientConnection with a scripted shell."""

    def __init__(self, switch: "FakeSwitch", index: int) -> None:
        self.switch = switch
        self.index = index
        self.closed = False
        self.responsive = True
        self.process: FakeProcess | None = None
        self.process_kwargs: dict = {}
        self.close_error: Exception | None = None

    async def create_process(self, **kwargs) -> FakeProcess:
        self.process_kwargs = kwargs
        self.process = FakeProcess(self)
        self.process.stdout.feed(f"{self.switch.banner}\r\n{self.switch.prompt}")
        return self.process

    def handle_line(self, line: str) -> None:
        self.switch.written.append((self.index, line))
        if not self.responsive or self.process is None:
            return
        output = self.switch.respond(line)
        delay = self.switch.response_delay
        if delay:
            asyncio.get_running_loop().call_later(delay, self.process.stdout.feed, output)
        else:
            self.process.stdout.feed(output)

    def hang_up(self) -> None:
        """Drop the shell output stream, like a device reboot."""
        if self.process is not None:
            self.process.stdout.feed_eof()

    def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        if not self.closed:
            self.closed = True
            self.hang_up()

    def is_closed(self) -> bool:
        return self.closed


class FakeSwitch:
    """Scripted network switch reachable through a patched asyncssh.connect."""

    def __init__(
        self,
        prompt: str = "<sw1>",
        banner: str = "Info: The max number of VTY users is 5.",
        version_text: str = HUAWEI_VERSION,
        version_command: str = "dis version",
        responses: dict[str, str] | None = None,
        connect_delay: float = 0.0,
        response_delay: float = 0.0,
    ) -> None:
        self.prompt = prompt
        self.banner = banner
        self.version_text = version_text
        self.version_command = version_command
        self.responses = {"dis clock": "2024-01-01 10:00:00"}
        self.responses.update(responses or {})
        self.connect_delay = connect_delay
        self.response_delay = response_delay
        self.connections: list[FakeConnection] = []
        self.connect_kwargs: list[dict] = []
        self.written: list[tuple[int, str]] = []
        self.fail_with: Exception | None = None

    @property
    def connect_count(self) -> int:
        return len(self.connections)

    def lines(self, connection: int | None = None) -> list[str]:
        """Lines written to the device, optionally for one connection."""
        return [
            line
            for index, line in self.written
            if connection is None or index == connection
        ]

    def respond(self, line: str) -> str:
        command = line.strip()
        if not command:
            return f"\r\n{self.prompt}"
        if command == self.version_command:
            body = self.version_text
        else:
            body = self.responses.get(command, "")
        if body:
            return f"{line}\r\n{body}\r\n{self.prompt}"
        return f"{line}\r\n{self.prompt}"

    async def connect(self, host: str, port: int = 22, **kwargs) -> FakeConnection:
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.fail_with is not None:
            raise self.fail_with
        self.connect_kwargs.append({"host": host, "port": port, **kwargs})
        connection = FakeConnection(self, len(self.connections))
        self.connections.append(connection)
        return connection


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with short waits so framing completes in milliseconds."""
    return Settings(
        idle_timeout=600,
        cleanup_interval=30,
        login_wait=0.02,
        live_check_wait=0.05,
        brand_wait=0.02,
        command_wait=0.02,
        poll_interval=0.005,
        max_polls=300,
    )


@pytest.fixture
def fake_switch() -> Iterator[FakeSwitch]:
    """Huawei-like fake switch patched in place of asyncssh.connect."""
    switch = FakeSwitch()
    with patch("switch_mcp.services.connection.asyncssh.connect", new=switch.connect):
        yield switch


@pytest.fixture
def identity() -> TargetIdentity:
    return TargetIdentity(user="admin", password="secret", address="10.0.0.1:22")


@pytest_asyncio.fixture
async def pool(fast_settings: Settings):
    """Session pool closed after the test."""
    pool = SessionPool(fast_settings)
    yield pool
    await pool.close_all()
