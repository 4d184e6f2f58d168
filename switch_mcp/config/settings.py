"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Original switch firmware often only speaks CTR or CBC ciphers.
DEFAULT_ENCRYPTION_ALGS: list[str] = [
    "aes128-ctr",
    "aes192-ctr",
    "aes256-ctr",
    "aes128-gcm@openssh.com",
    "aes256-gcm@openssh.com",
    "aes128-cbc",
    "aes256-cbc",
    "3des-cbc",
]


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    Durations are in seconds.
    """

    # Session pool
    idle_timeout: int = field(default=600)
    cleanup_interval: float = field(default=30.0)

    # Transport
    connect_timeout: int = field(default=20)
    known_hosts: str | None = field(default=None)
    encryption_algs: list[str] = field(
        default_factory=lambda: list(DEFAULT_ENCRYPTION_ALGS)
    )
    term_type: str = field(default="vt100")
    term_width: int = field(default=80)
    term_height: int = field(default=40)
    queue_size: int = field(default=1024)

    # Output framing
    login_wait: float = field(default=1.0)
    live_check_wait: float = field(default=2.0)
    brand_wait: float = field(default=1.0)
    command_wait: float = field(default=2.0)
    poll_interval: float = field(default=0.1)
    max_polls: int = field(default=300)
    extra_waits: int = field(default=1)
    read_deadline: float | None = field(default=None)

    # MCP server
    transport: str = field(default="http")
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")
    log_payloads: bool = field(default=False)
    include_traceback: bool = field(default=False)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from SWITCH_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        defaults = cls()
        return cls(
            idle_timeout=cls._get_int("SWITCH_IDLE_TIMEOUT", defaults.idle_timeout),
            cleanup_interval=cls._get_float(
                "SWITCH_CLEANUP_INTERVAL", defaults.cleanup_interval
            ),
            connect_timeout=cls._get_int(
                "SWITCH_CONNECT_TIMEOUT", defaults.connect_timeout
            ),
            known_hosts=cls._get_known_hosts(),
            encryption_algs=cls._get_list(
                "SWITCH_ENCRYPTION_ALGS", defaults.encryption_algs
            ),
            term_type=os.getenv("SWITCH_TERM_TYPE", defaults.term_type),
            term_width=cls._get_int("SWITCH_TERM_WIDTH", defaults.term_width),
            term_height=cls._get_int("SWITCH_TERM_HEIGHT", defaults.term_height),
            queue_size=cls._get_int("SWITCH_QUEUE_SIZE", defaults.queue_size),
            login_wait=cls._get_float("SWITCH_LOGIN_WAIT", defaults.login_wait),
            live_check_wait=cls._get_float(
                "SWITCH_LIVE_CHECK_WAIT", defaults.live_check_wait
            ),
            brand_wait=cls._get_float("SWITCH_BRAND_WAIT", defaults.brand_wait),
            command_wait=cls._get_float("SWITCH_COMMAND_WAIT", defaults.command_wait),
            poll_interval=cls._get_float(
                "SWITCH_POLL_INTERVAL", defaults.poll_interval
            ),
            max_polls=cls._get_int("SWITCH_MAX_POLLS", defaults.max_polls),
            extra_waits=cls._get_int("SWITCH_EXTRA_WAITS", defaults.extra_waits),
            read_deadline=cls._get_optional_float("SWITCH_READ_DEADLINE"),
            transport=cls._get_transport(),
            http_host=os.getenv("SWITCH_HTTP_HOST", defaults.http_host),
            http_port=cls._get_int("SWITCH_HTTP_PORT", defaults.http_port),
            log_level=os.getenv("SWITCH_LOG_LEVEL", defaults.log_level).upper(),
            log_payloads=cls._get_bool("SWITCH_LOG_PAYLOADS", False),
            include_traceback=cls._get_bool("SWITCH_INCLUDE_TRACEBACK", False),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        """Get float from environment, falling back to default on bad values."""
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float for %s: %s, using default %s", key, value, default)
            return default

    @classmethod
    def _get_optional_float(cls, key: str) -> float | None:
        """Get a positive float, or None when unset, invalid or <= 0."""
        value = cls._get_float(key, 0.0)
        return value if value > 0 else None

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_list(key: str, default: list[str]) -> list[str]:
        """Get a comma separated list, or a copy of default when unset."""
        value = os.getenv(key, "").strip()
        if not value:
            return list(default)
        return [item.strip() for item in value.split(",") if item.strip()]

    @staticmethod
    def _get_known_hosts() -> str | None:
        """Get known_hosts path.

        Switches rarely have stable host keys on record, so verification
        is off unless SWITCH_KNOWN_HOSTS names a file.

        Returns:
            Expanded path, or None when unset or "none"
        """
        value = os.getenv("SWITCH_KNOWN_HOSTS", "").strip()
        if not value or value.lower() == "none":
            return None
        return os.path.expanduser(value)

    @staticmethod
    def _get_transport() -> str:
        """Get transport from environment with validation.

        Returns:
            Transport type ("http" or "stdio")
        """
        transport = os.getenv("SWITCH_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "http"
