"""Input validation utilities."""

from typing import Final

# Characters that could smuggle extra commands or arguments
SUSPICIOUS_CHARS: Final[list[str]] = [
    "/", "\\", ";", "&", "|", "$", "`", "<", ">", " ", "\t", "\n", "\r", "\x00",
]

MAX_HOST_LENGTH: Final[int] = 253
MAX_COUNT: Final[int] = 100


def validate_host(host: str) -> str:
    """Validate a host name before it reaches the command line.

    Args:
        host: The host name to validate

    Returns:
        Validated host name (surrounding whitespace stripped)

    Raises:
        ValueError: If host name is invalid
    """
    host = host.strip() if host else ""
    if not host:
        raise ValueError("Host cannot be empty")

    if len(host) > MAX_HOST_LENGTH:
        raise ValueError(f"Host name too long: {len(host)} chars")

    # A leading dash would be parsed as an option by the tool
    if host.startswith("-"):
        raise ValueError(f"Host cannot start with '-': {host!r}")

    for char in SUSPICIOUS_CHARS:
        if char in host:
            raise ValueError(f"Host contains invalid characters: {host!r}")

    return host


def validate_count(count: int) -> int:
    """Validate an echo request count.

    Raises:
        ValueError: If count is outside 1..MAX_COUNT
    """
    if not 1 <= count <= MAX_COUNT:
        raise ValueError(f"Count must be between 1 and {MAX_COUNT}, got {count}")
    return count
