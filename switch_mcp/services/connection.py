"""SSH transport for interactive switch shells."""

import asyncio
import logging
from typing import TYPE_CHECKING

import asyncssh

if TYPE_CHECKING:
    from switch_mcp.config import Settings
    from switch_mcp.models import TargetIdentity

logger = logging.getLogger(__name__)

TERMINAL_MODES = {
    asyncssh.PTY_ECHO: 1,
    asyncssh.PTY_OP_ISPEED: 14400,
    asyncssh.PTY_OP_OSPEED: 14400,
}


class ConnectionError(Exception):
    """Failed to open an SSH shell on a switch."""

    def __init__(self, target: str, original_error: Exception):
        """Initialize connection error.

        Args:
            target: Printable target (user@host:port, never the password)
            original_error: Original exception that caused the failure
        """
        self.target = target
        self.original_error = original_error
        super().__init__(f"Cannot connect to {target}: {original_error}")


class SessionClosedError(Exception):
    """Operation attempted on a closed or broken switch session."""


async def open_shell(
    identity: "TargetIdentity",
    settings: "Settings",
) -> tuple["asyncssh.SSHClientConnection", "asyncssh.SSHClientProcess"]:
    """Connect to a switch and start an interactive PTY shell.

    Args:
        identity: Target endpoint and credentials
        settings: Transport settings (timeouts, ciphers, terminal)

    Returns:
        Tuple of (connection, shell process)

    Raises:
        ConnectionError: If dial, authentication or shell start fails
    """
    logger.info(
        "Opening SSH connection to %s (%s:%d)",
        identity,
        identity.host,
        identity.port,
    )
    if settings.known_hosts is None:
        logger.debug("Host key verification disabled for %s", identity)

    try:
        conn = await asyncssh.connect(
            identity.host,
            port=identity.port,
            username=identity.user,
            password=identity.password,
            known_hosts=settings.known_hosts,
            client_keys=None,
            encryption_algs=settings.encryption_algs,
            connect_timeout=settings.connect_timeout,
        )
    except (OSError, asyncssh.Error, asyncio.TimeoutError) as e:
        logger.error("SSH dial to %s failed: %s", identity, e)
        raise ConnectionError(str(identity), e) from e

    try:
        process = await conn.create_process(
            term_type=settings.term_type,
            term_size=(settings.term_width, settings.term_height),
            term_modes=TERMINAL_MODES,
            errors="replace",
        )
    except (OSError, asyncssh.Error) as e:
        logger.error("Opening shell on %s failed: %s", identity, e)
        conn.close()
        raise ConnectionError(str(identity), e) from e
    except BaseException:
        conn.close()
        raise

    logger.debug("Shell started on %s", identity)
    return conn, process
