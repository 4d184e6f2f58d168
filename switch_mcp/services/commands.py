"""Command orchestration over pooled switch sessions.

Each entry point holds the identity lock for its whole run:
lock -> get session -> write -> read -> filter -> unlock.
"""

import logging

from switch_mcp.models import TargetIdentity
from switch_mcp.services.filter import filter_result
from switch_mcp.services.pool import SessionPool
from switch_mcp.utils.validation import validate_address, validate_user

logger = logging.getLogger(__name__)


def make_identity(user: str, password: str, address: str) -> TargetIdentity:
    """Build a validated target identity.

    Raises:
        ValueError: If user or address is invalid
    """
    return TargetIdentity(
        user=validate_user(user),
        password=password,
        address=validate_address(address),
    )


async def run_commands(
    pool: SessionPool,
    user: str,
    password: str,
    address: str,
    *commands: str,
) -> str:
    """Run commands on a switch, auto-detecting its brand on first connect.

    Returns:
        Filtered output starting at the echo of the first command

    Raises:
        ValueError: If no commands are given or the target is invalid
        ConnectionError: If the switch cannot be reached
    """
    return await run_commands_with_brand(pool, user, password, address, "", *commands)


async def run_commands_with_brand(
    pool: SessionPool,
    user: str,
    password: str,
    address: str,
    brand: str,
    *commands: str,
) -> str:
    """Run commands on a switch whose brand may already be known.

    Args:
        pool: Session pool to use
        user: SSH user
        password: SSH password
        address: Switch address, host:port
        brand: huawei, h3c or cisco; anything else triggers detection
        commands: Commands to run, in order

    Returns:
        Filtered output starting at the echo of the first command

    Raises:
        ValueError: If no commands are given or the target is invalid
        ConnectionError: If the switch cannot be reached
    """
    if not commands:
        raise ValueError("At least one command is required")

    identity = make_identity(user, password, address)

    async with pool.lock(identity):
        session = await pool.get_session(identity, brand.lower())
        stale = session.clear()
        if stale:
            logger.debug("Dropped %d stale chars from %s", len(stale), identity)
        await session.write(*commands)
        result = await session.read_quiescent(pool.settings.command_wait)

    logger.debug(
        "Ran %d command(s) on %s, %d chars of output",
        len(commands),
        identity,
        len(result),
    )
    return filter_result(result, commands[0])


async def get_ssh_brand(
    pool: SessionPool,
    user: str,
    password: str,
    address: str,
) -> str:
    """Get the vendor of a switch.

    Returns:
        huawei, h3c, cisco, or "" when unrecognized

    Raises:
        ValueError: If the target is invalid
        ConnectionError: If the switch cannot be reached
    """
    identity = make_identity(user, password, address)

    async with pool.lock(identity):
        session = await pool.get_session(identity)
        return await session.detect_brand()
