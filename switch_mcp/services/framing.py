"""Quiescence based framing of interactive shell output.

A switch shell never says "this response is finished". A read is
treated as complete when either an expected substring (usually a prompt
character) is present once the stream pauses, or the stream stays silent
through the configured number of quiescence windows.

Worst case wall clock for one read is roughly
``max_polls * poll_interval`` plus the quiescence waits, unless a hard
``deadline`` is configured.
"""

import asyncio
import logging
from collections.abc import Sequence

from switch_mcp.protocols import Drain

logger = logging.getLogger(__name__)

PROMPT_CHARS: tuple[str, ...] = ("#", ">", "]")


class QuiescenceFramer:
    """Poll the inbound buffer until output settles."""

    def __init__(
        self,
        poll_interval: float = 0.1,
        max_polls: int = 300,
        extra_waits: int = 1,
        deadline: float | None = None,
    ) -> None:
        """Initialize framer.

        Args:
            poll_interval: Sleep between buffer polls, lets chunks accumulate
            max_polls: Upper bound on polls so a read always returns
            extra_waits: Quiescence windows tolerated before giving up,
                absorbs late bursts from slow devices
            deadline: Optional hard cap in seconds for a single read

        Raises:
            ValueError: If max_polls or extra_waits are out of range
        """
        if max_polls <= 0:
            raise ValueError(f"max_polls must be > 0, got {max_polls}")
        if extra_waits < 0:
            raise ValueError(f"extra_waits must be >= 0, got {extra_waits}")

        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.extra_waits = extra_waits
        self.deadline = deadline

    async def read(
        self,
        drain: Drain,
        window: float,
        expects: Sequence[str] = (),
    ) -> str:
        """Accumulate output until it matches or goes quiet."""
        loop = asyncio.get_running_loop()
        stop_at = loop.time() + self.deadline if self.deadline else None
        output = ""
        waits = 0

        for _ in range(self.max_polls):
            await asyncio.sleep(self.poll_interval)
            data = drain()
            if data:
                output += data
                waits = 0
            elif any(expect in output for expect in expects):
                return output
            elif waits >= self.extra_waits:
                return output
            else:
                wait = window
                if stop_at is not None:
                    wait = max(0.0, min(window, stop_at - loop.time()))
                await asyncio.sleep(wait)
                waits += 1

            if stop_at is not None and loop.time() >= stop_at:
                output += drain()
                logger.debug("Read deadline reached after %d chars", len(output))
                return output

        logger.debug("Read stopped at poll limit (%d)", self.max_polls)
        return output
