"""Switch target data models."""

from dataclasses import dataclass, field

DEFAULT_SSH_PORT = 22


@dataclass(frozen=True)
class TargetIdentity:
    """One switch endpoint plus the credentials used to log in to it.

    Identical (user, password, address) triples always produce the same
    ``key``, so they share one pooled session and one lock.
    """

    user: str
    password: str = field(repr=False)
    address: str

    @property
    def key(self) -> tuple[str, str, str]:
        """Cache and lock key for this target."""
        return (self.user, self.password, self.address)

    @property
    def host(self) -> str:
        """Host part of the address (IPv6 brackets removed)."""
        host, _, port = self.address.rpartition(":")
        if not host or not port.isdigit():
            host = self.address
        return host.strip("[]")

    @property
    def port(self) -> int:
        """Port part of the address, 22 when the address has none."""
        host, _, port = self.address.rpartition(":")
        if host and port.isdigit():
            return int(port)
        return DEFAULT_SSH_PORT

    def __str__(self) -> str:
        return f"{self.user}@{self.address}"
