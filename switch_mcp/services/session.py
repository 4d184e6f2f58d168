"""Interactive switch shell with background stream pumps.

Each session runs two tasks for its whole lifetime:

- writer: takes commands off the outbound queue and writes them, plus a
  line terminator, to the shell's stdin
- reader: reads raw chunks from the shell's stdout and puts them on the
  inbound queue

Callers never touch the transport directly. They enqueue commands with
``write()`` and collect output with ``read_until()`` / ``read_quiescent()``,
which hand the inbound queue to an ``OutputFramer``.

Locking Strategy:
- A session is not safe for concurrent commands. The pool's per-identity
  lock serializes callers; the pumps run regardless of who holds it.
"""

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from switch_mcp.models import SessionState
from switch_mcp.services.brand import PROBE_COMMANDS, detect_brand, is_known_brand
from switch_mcp.services.connection import SessionClosedError, open_shell
from switch_mcp.services.framing import PROMPT_CHARS, QuiescenceFramer

if TYPE_CHECKING:
    import asyncssh

    from switch_mcp.config import Settings
    from switch_mcp.models import TargetIdentity
    from switch_mcp.protocols import OutputFramer

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 65 * 1024
LINE_TERMINATOR = "\n"


class SwitchSession:
    """One live interactive shell on a switch."""

    def __init__(
        self,
        identity: "TargetIdentity",
        settings: "Settings",
        framer: "OutputFramer | None" = None,
    ) -> None:
        """Initialize an unconnected session.

        Args:
            identity: Target endpoint and credentials
            settings: Transport and framing settings
            framer: Output framing strategy, defaults to QuiescenceFramer
        """
        self.identity = identity
        self.settings = settings
        self.framer: "OutputFramer" = framer or QuiescenceFramer(
            poll_interval=settings.poll_interval,
            max_polls=settings.max_polls,
            extra_waits=settings.extra_waits,
            deadline=settings.read_deadline,
        )
        self.state = SessionState.CREATED
        self.brand = ""
        self.last_used = datetime.now()
        self.pump_error: BaseException | None = None

        self._conn: "asyncssh.SSHClientConnection | None" = None
        self._process: "asyncssh.SSHClientProcess | None" = None
        self._outbound: asyncio.Queue[str] = asyncio.Queue(maxsize=settings.queue_size)
        self._inbound: asyncio.Queue[str] = asyncio.Queue(maxsize=settings.queue_size)
        self._pumps: list[asyncio.Task[Any]] = []

    @classmethod
    async def open(
        cls,
        identity: "TargetIdentity",
        settings: "Settings",
        framer: "OutputFramer | None" = None,
    ) -> "SwitchSession":
        """Connect, start the shell and wait for the login banner.

        Raises:
            ConnectionError: If the transport cannot be established
        """
        session = cls(identity, settings, framer=framer)
        await session.connect()
        return session

    async def connect(self) -> None:
        """Open the transport, start both pumps and drain the banner.

        Raises:
            ConnectionError: If the transport cannot be established
        """
        self.state = SessionState.CONNECTING
        try:
            self._conn, self._process = await open_shell(self.identity, self.settings)
        except BaseException:
            self.state = SessionState.CLOSED
            raise

        self._pumps = [
            asyncio.create_task(self._write_pump(), name=f"write:{self.identity}"),
            asyncio.create_task(self._read_pump(), name=f"read:{self.identity}"),
        ]

        try:
            banner = await self.read_until(self.settings.login_wait, *PROMPT_CHARS)
        except BaseException:
            await self.close()
            raise
        logger.debug("Login banner from %s: %d chars", self.identity, len(banner))
        self.state = SessionState.SHELL_READY
        self.touch()

    async def _write_pump(self) -> None:
        """Move queued commands to the shell's stdin."""
        assert self._process is not None
        stdin = self._process.stdin
        try:
            while True:
                command = await self._outbound.get()
                stdin.write(command + LINE_TERMINATOR)
                await stdin.drain()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._record_pump_error("write", e)

    async def _read_pump(self) -> None:
        """Move raw shell output onto the inbound queue."""
        assert self._process is not None
        stdout = self._process.stdout
        try:
            while True:
                chunk = await stdout.read(READ_CHUNK_SIZE)
                if not chunk:
                    raise EOFError("shell output closed")
                await self._inbound.put(chunk)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._record_pump_error("read", e)

    def _record_pump_error(self, pump: str, error: Exception) -> None:
        """Keep the first pump failure; later operations see it."""
        if self.state == SessionState.CLOSED:
            return
        logger.warning("Session %s %s pump stopped: %s", self.identity, pump, error)
        if self.pump_error is None:
            self.pump_error = error

    async def write(self, *commands: str) -> None:
        """Queue commands for the shell, in order.

        Raises:
            SessionClosedError: If the session is closed or a pump has died
        """
        if not self.is_alive:
            raise SessionClosedError(f"Session to {self.identity} is not usable")
        logger.debug("Write to %s: %r", self.identity, commands)
        for command in commands:
            await self._outbound.put(command)

    def _drain(self) -> str:
        """Take everything currently buffered on the inbound queue."""
        chunks: list[str] = []
        while True:
            try:
                chunks.append(self._inbound.get_nowait())
            except asyncio.QueueEmpty:
                break
        return "".join(chunks)

    def clear(self) -> str:
        """Drop leftover output so it cannot leak into the next result."""
        return self._drain()

    async def read_until(self, window: float, *expects: str) -> str:
        """Read until an expected substring shows up or output goes quiet."""
        if self.is_closed:
            return self._drain()
        return await self.framer.read(self._drain, window, expects)

    async def read_quiescent(self, window: float) -> str:
        """Read until output goes quiet."""
        if self.is_closed:
            return self._drain()
        return await self.framer.read(self._drain, window, ())

    async def check_live(self) -> bool:
        """Send an empty line and check a prompt comes back."""
        if not self.is_alive:
            return False
        try:
            await self.write("")
        except SessionClosedError:
            return False
        result = await self.read_until(self.settings.live_check_wait, *PROMPT_CHARS)
        return any(char in result for char in PROMPT_CHARS)

    async def detect_brand(self) -> str:
        """Probe the vendor with version commands, cached after first hit.

        Returns:
            huawei, h3c, cisco, or "" when the vendor is not recognized
        """
        if self.brand:
            return self.brand
        await self.write(*PROBE_COMMANDS)
        result = await self.read_quiescent(self.settings.brand_wait)
        brand = detect_brand(result)
        if is_known_brand(brand):
            self.brand = brand
        return self.brand

    async def close(self) -> None:
        """Stop the pumps and close the shell and connection.

        Never raises, so a misbehaving device cannot stall pool cleanup.
        """
        if self.state == SessionState.CLOSED and not self._pumps:
            return
        self.state = SessionState.CLOSED

        for task in self._pumps:
            task.cancel()
        for task in self._pumps:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.error("Pump of %s failed during close: %s", self.identity, e)
        self._pumps = []

        try:
            if self._process is not None:
                self._process.close()
            if self._conn is not None:
                self._conn.close()
        except Exception as e:
            logger.error("Close session %s err: %s", self.identity, e)

        self._drain()
        logger.debug("Session %s closed", self.identity)

    def touch(self) -> None:
        """Update last-used timestamp."""
        self.last_used = datetime.now()

    @property
    def idle_seconds(self) -> float:
        """Seconds since the session was last used."""
        return (datetime.now() - self.last_used).total_seconds()

    @property
    def is_closed(self) -> bool:
        """Check if the session was closed."""
        return self.state == SessionState.CLOSED

    @property
    def is_alive(self) -> bool:
        """Open, and both pumps still running."""
        return not self.is_closed and self.pump_error is None

    def __repr__(self) -> str:
        return (
            f"SwitchSession({self.identity}, state={self.state.value}, "
            f"brand={self.brand or 'unknown'})"
        )
