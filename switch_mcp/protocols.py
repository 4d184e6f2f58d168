"""Protocol interfaces for dependency inversion.

Interactive switch shells have no message framing, so deciding when a
response is complete is a strategy that can be swapped per vendor
without touching the pool or the result filter.

Usage Example:

    from switch_mcp.protocols import OutputFramer

    class PromptRegexFramer:
        async def read(self, drain, window, expects=()):
            ...

    session = SwitchSession(identity, settings, framer=PromptRegexFramer())
"""

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from switch_mcp.models import TargetIdentity

Drain = Callable[[], str]


@runtime_checkable
class OutputFramer(Protocol):
    """Decides when accumulated shell output forms a complete response."""

    async def read(
        self,
        drain: Drain,
        window: float,
        expects: Sequence[str] = (),
    ) -> str:
        """Accumulate output until the response is judged complete.

        Args:
            drain: Returns (and removes) all output received so far,
                "" when nothing new has arrived
            window: Quiescence window in seconds
            expects: Substrings that end the read as soon as they appear

        Returns:
            Accumulated output
        """
        ...


@runtime_checkable
class SessionPoolProtocol(Protocol):
    """Protocol for pooled switch sessions.

    Example implementation:
        class MyPool:
            def lock(self, identity):
                # async context manager serialising one target
                ...

            async def get_session(self, identity, brand=""):
                return session
    """

    def lock(self, identity: TargetIdentity) -> Any:
        """Return an async context manager holding the identity lock."""
        ...

    async def get_session(self, identity: TargetIdentity, brand: str = "") -> Any:
        """Get a live session for identity, creating one if needed.

        Raises:
            ConnectionError: If a new session cannot be opened
        """
        ...

    async def close_all(self) -> None:
        """Close every pooled session."""
        ...


__all__ = [
    "Drain",
    "OutputFramer",
    "SessionPoolProtocol",
]
