"""Session lifecycle states."""

from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of a pooled switch shell.

    CREATED -> CONNECTING -> SHELL_READY -> ACTIVE -> CLOSED.
    A failed connect goes straight to CLOSED.
    """

    CREATED = "created"
    CONNECTING = "connecting"
    SHELL_READY = "shell_ready"
    ACTIVE = "active"
    CLOSED = "closed"
