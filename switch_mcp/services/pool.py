"""Switch session pooling with idle eviction.

Locking Strategy:
- `_meta_lock`: Protects _sessions dict and _identity_locks dict structure
- Per-identity locks: Serialize every operation on one switch shell.
  Callers hold the identity lock around get_session() and the commands
  they run; interactive shells cannot interleave two commands.
- Lock acquisition order: Always identity lock first, then meta-lock if needed
- Identity lock objects are never removed, only session entries are

Idle Eviction:
- A background task wakes every `cleanup_interval` seconds
- Sessions unused for longer than `idle_timeout` are closed and dropped
- A session whose identity lock is held has a command in flight and is
  skipped until the next pass
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from switch_mcp.config import Settings
from switch_mcp.models import SessionState, TargetIdentity
from switch_mcp.services.brand import is_known_brand, no_page_command
from switch_mcp.services.framing import PROMPT_CHARS
from switch_mcp.services.session import SwitchSession

logger = logging.getLogger(__name__)

SessionFactory = Callable[[TargetIdentity, Settings], Awaitable[SwitchSession]]


class SessionPool:
    """Cache of live switch shells keyed by target identity."""

    def __init__(
        self,
        settings: Settings | None = None,
        session_factory: SessionFactory | None = None,
    ) -> None:
        """Initialize pool.

        Args:
            settings: Pool, transport and framing settings
            session_factory: Coroutine opening a new session,
                defaults to SwitchSession.open

        Raises:
            ValueError: If idle_timeout or cleanup_interval is not positive
        """
        self.settings = settings or Settings()
        if self.settings.idle_timeout <= 0:
            raise ValueError(
                f"idle_timeout must be > 0, got {self.settings.idle_timeout}"
            )
        if self.settings.cleanup_interval <= 0:
            raise ValueError(
                f"cleanup_interval must be > 0, got {self.settings.cleanup_interval}"
            )

        self.idle_timeout = self.settings.idle_timeout
        self.cleanup_interval = self.settings.cleanup_interval
        self._session_factory = session_factory or SwitchSession.open
        self._sessions: dict[tuple[str, str, str], SwitchSession] = {}
        self._identity_locks: dict[tuple[str, str, str], asyncio.Lock] = {}
        self._meta_lock = asyncio.Lock()  # Protects _sessions and _identity_locks
        self._cleanup_task: asyncio.Task[Any] | None = None

        logger.info(
            "SessionPool initialized (idle_timeout=%ds, cleanup_interval=%.1fs)",
            self.idle_timeout,
            self.cleanup_interval,
        )

    async def _get_identity_lock(self, identity: TargetIdentity) -> asyncio.Lock:
        """Get or create the lock for one identity.

        Args:
            identity: Target to get the lock for

        Returns:
            Lock for the specified identity
        """
        async with self._meta_lock:
            if identity.key not in self._identity_locks:
                self._identity_locks[identity.key] = asyncio.Lock()
            return self._identity_locks[identity.key]

    async def acquire(self, identity: TargetIdentity) -> None:
        """Acquire the identity lock, creating it on first use."""
        lock = await self._get_identity_lock(identity)
        await lock.acquire()

    async def release(self, identity: TargetIdentity) -> None:
        """Release the identity lock.

        Lock objects are never removed, so no meta lock is needed here.

        Raises:
            RuntimeError: If the lock does not exist
        """
        lock = self._identity_locks.get(identity.key)
        if lock is None:
            raise RuntimeError(f"No lock exists for {identity}")
        lock.release()

    @asynccontextmanager
    async def lock(self, identity: TargetIdentity) -> AsyncIterator[None]:
        """Hold the identity lock for the duration of the block."""
        identity_lock = await self._get_identity_lock(identity)
        await identity_lock.acquire()
        try:
            yield
        finally:
            identity_lock.release()

    async def get_session(
        self,
        identity: TargetIdentity,
        brand: str = "",
    ) -> SwitchSession:
        """Get a live session for identity, reconnecting when needed.

        The caller must hold the identity lock.

        Args:
            identity: Target endpoint and credentials
            brand: Known vendor, anything else triggers auto-detection

        Returns:
            Ready-to-use session

        Raises:
            ConnectionError: If a new session cannot be opened
        """
        session = self.get_cached(identity)

        if session is not None:
            if await session.check_live():
                session.touch()
                logger.debug(
                    "Reusing existing session to %s (pool_size=%d)",
                    identity,
                    len(self._sessions),
                )
                return session
            logger.info("Session to %s failed liveness check, reconnecting", identity)
            async with self._meta_lock:
                self._sessions.pop(identity.key, None)
            await session.close()

        session = await self._session_factory(identity, self.settings)
        try:
            await self._init_session(session, brand)
        except BaseException:
            await session.close()
            raise

        async with self._meta_lock:
            self._sessions[identity.key] = session

        logger.info(
            "Switch session established to %s (brand=%s, pool_size=%d)",
            identity,
            session.brand or "unknown",
            len(self._sessions),
        )

        self.start()
        return session

    async def _init_session(self, session: SwitchSession, brand: str) -> None:
        """Detect the vendor if needed and turn off output paging."""
        if is_known_brand(brand):
            session.brand = brand
        else:
            brand = await session.detect_brand()

        command = no_page_command(brand)
        if command is not None:
            await session.write(command)
            await session.read_until(self.settings.login_wait, *PROMPT_CHARS)
        else:
            logger.debug("Unknown brand for %s, paging left enabled", session.identity)

        session.state = SessionState.ACTIVE
        session.touch()

    def start(self) -> None:
        """Start the idle cleanup task if it is not running.

        Needs a running event loop.
        """
        if self._cleanup_task is None or self._cleanup_task.done():
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.debug("Started session cleanup task")

    async def _cleanup_loop(self) -> None:
        """Periodically close idle sessions."""
        logger.debug("Cleanup loop started (interval=%.1fs)", self.cleanup_interval)
        while True:
            await asyncio.sleep(self.cleanup_interval)
            try:
                await self._cleanup_idle()
            except Exception as e:
                logger.error("Session cleanup pass failed: %s", e)

    async def _cleanup_idle(self) -> int:
        """Close sessions that have been idle too long.

        Returns:
            Number of sessions removed
        """
        async with self._meta_lock:
            candidates = [
                (key, session)
                for key, session in self._sessions.items()
                if session.is_closed or session.idle_seconds > self.idle_timeout
            ]

        removed_count = 0

        for key, session in candidates:
            identity = session.identity
            identity_lock = await self._get_identity_lock(identity)
            if identity_lock.locked():
                logger.debug("Skipping eviction of %s, command in flight", identity)
                continue

            async with identity_lock:
                if self._sessions.get(key) is not session:
                    continue
                if not session.is_closed and session.idle_seconds <= self.idle_timeout:
                    continue

                logger.info(
                    "Closing idle session to %s (unused for %.0fs, pool_size=%d)",
                    identity,
                    session.idle_seconds,
                    len(self._sessions) - 1,
                )
                await session.close()
                async with self._meta_lock:
                    del self._sessions[key]
                removed_count += 1

        if removed_count > 0:
            logger.debug(
                "Cleanup complete: removed %d session(s), %d remaining",
                removed_count,
                len(self._sessions),
            )
        return removed_count

    async def remove_session(self, identity: TargetIdentity) -> None:
        """Close and drop the session for identity, if any."""
        async with self.lock(identity):
            async with self._meta_lock:
                session = self._sessions.pop(identity.key, None)
            if session is None:
                logger.debug("No session to remove for %s (not in pool)", identity)
                return
            logger.info(
                "Removing session to %s (pool_size=%d)",
                identity,
                len(self._sessions),
            )
            await session.close()

    async def close_all(self) -> None:
        """Close all sessions and stop the cleanup task."""
        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            logger.debug("Cleanup task cancelled")
        self._cleanup_task = None

        async with self._meta_lock:
            sessions = list(self._sessions.values())

        if sessions:
            logger.info("Closing all %d session(s)", len(sessions))
            for session in sessions:
                await self.remove_session(session.identity)

    def get_cached(self, identity: TargetIdentity) -> SwitchSession | None:
        """Return the cached session for identity without checking it."""
        return self._sessions.get(identity.key)

    @property
    def pool_size(self) -> int:
        """Return the current number of cached sessions."""
        return len(self._sessions)

    @property
    def active_targets(self) -> list[str]:
        """Return printable targets (user@address) with cached sessions."""
        return [str(session.identity) for session in self._sessions.values()]
