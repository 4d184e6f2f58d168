"""Input validation utilities."""

from typing import Final

# Characters that have no business in a host name or credential
SUSPICIOUS_CHARS: Final[list[str]] = ["/", "\\", ";", "&", "|", "$", "`", "\n", "\r", "\x00"]


def validate_address(address: str) -> str:
    """Validate a switch address of the form host:port.

    Args:
        address: The address to validate

    Returns:
        Address with surrounding whitespace removed

    Raises:
        ValueError: If the address is empty, malformed or has a bad port
    """
    address = address.strip()
    if not address:
        raise ValueError("Address cannot be empty")

    if len(address) > 260:
        raise ValueError(f"Address too long: {len(address)} chars")

    for char in SUSPICIOUS_CHARS:
        if char in address:
            raise ValueError(f"Address contains invalid characters: {address!r}")

    host, sep, port = address.rpartition(":")
    if not sep or not host.strip("[]"):
        raise ValueError(f"Address must be host:port, got {address!r}")

    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"Invalid port in address {address!r}")

    return address


def validate_user(user: str) -> str:
    """Validate an SSH user name.

    Raises:
        ValueError: If user is empty or contains control characters
    """
    if not user:
        raise ValueError("User cannot be empty")
    if any(char in user for char in ("\n", "\r", "\x00")):
        raise ValueError(f"User contains invalid characters: {user!r}")
    return user
