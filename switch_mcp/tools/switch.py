"""Switch command tools exposed over MCP."""

import logging
from collections.abc import Awaitable, Callable

from switch_mcp.services import (
    ConnectionError,
    SessionClosedError,
    SessionPool,
    get_ssh_brand,
    run_commands_with_brand,
)

logger = logging.getLogger(__name__)

Tool = Callable[..., Awaitable[str]]


def build_tools(pool: SessionPool) -> list[Tool]:
    """Create the MCP tool functions bound to one session pool.

    Args:
        pool: Pool shared by every tool call of the server

    Returns:
        Tool coroutines, ready for FastMCP registration
    """

    async def run_commands(
        user: str,
        password: str,
        address: str,
        commands: list[str],
        brand: str = "",
    ) -> str:
        """Run commands on a network switch over an interactive SSH shell.

        The shell for (user, password, address) is kept open and reused by
        later calls. Output paging is disabled on first connect.

        Args:
            user: SSH user name
            password: SSH password
            address: Switch address as host:port
            commands: Commands to run, in order (e.g. ["dis clock"])
            brand: huawei, h3c or cisco if known; empty to auto-detect

        Returns:
            Shell output starting at the echo of the first command,
            or an "Error: ..." message
        """
        try:
            return await run_commands_with_brand(
                pool, user, password, address, brand, *commands
            )
        except ValueError as e:
            return f"Error: {e}"
        except (ConnectionError, SessionClosedError) as e:
            logger.warning("run_commands on %s failed: %s", address, e)
            return f"Error: {e}"

    async def get_brand(user: str, password: str, address: str) -> str:
        """Detect the vendor of a network switch.

        Args:
            user: SSH user name
            password: SSH password
            address: Switch address as host:port

        Returns:
            huawei, h3c, cisco, "unknown", or an "Error: ..." message
        """
        try:
            brand = await get_ssh_brand(pool, user, password, address)
        except ValueError as e:
            return f"Error: {e}"
        except (ConnectionError, SessionClosedError) as e:
            logger.warning("get_brand on %s failed: %s", address, e)
            return f"Error: {e}"
        return brand or "unknown"

    return [run_commands, get_brand]
