"""Dependency injection container for Switch MCP.

The session pool is constructed once and passed explicitly to whatever
runs commands, instead of living in module-level state.
"""

from dataclasses import dataclass

from switch_mcp.config import Settings
from switch_mcp.services.pool import SessionPool


@dataclass
class Dependencies:
    """Container for Switch MCP dependencies.

    Example:
        deps = Dependencies.create()
        output = await run_commands(deps.pool, "admin", "secret", "10.0.0.1:22", "dis clock")
    """

    settings: Settings
    pool: SessionPool

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies with settings from the environment.

        Returns:
            Initialized Dependencies instance
        """
        return cls.from_settings(Settings.from_env())

    @classmethod
    def from_settings(cls, settings: Settings) -> "Dependencies":
        """Create dependencies with custom settings.

        Args:
            settings: Custom Settings instance

        Returns:
            Dependencies with pool initialized from settings
        """
        return cls(settings=settings, pool=SessionPool(settings))

    async def cleanup(self) -> None:
        """Clean up resources (close all sessions)."""
        await self.pool.close_all()
