"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import math
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Runner and server settings.

    Handles parsing, validation, and defaults for all PING_RUNNER_* vars.
    """

    # Diagnostic tool
    command: str = field(default="ping")
    count: int = field(default=4)
    terminate_grace: float = field(default=2.0)

    # Execution
    max_workers: int = field(default=4)
    command_timeout: int = field(default=30)

    # Transport
    transport: str = field(default="http")
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)
    log_payloads: bool = field(default=False)
    slow_threshold_ms: int = field(default=1000)
    include_traceback: bool = field(default=False)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            command=os.getenv("PING_RUNNER_COMMAND", "ping").strip() or "ping",
            count=cls._get_int("PING_RUNNER_COUNT", 4),
            terminate_grace=cls._get_float("PING_RUNNER_TERMINATE_GRACE", 2.0),
            max_workers=cls._get_int("PING_RUNNER_MAX_WORKERS", 4),
            command_timeout=cls._get_int("PING_RUNNER_COMMAND_TIMEOUT", 30),
            transport=cls._get_transport(),
            http_host=os.getenv("PING_RUNNER_HTTP_HOST", "0.0.0.0"),
            http_port=cls._get_int("PING_RUNNER_HTTP_PORT", 8000),
            log_level=os.getenv("PING_RUNNER_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("PING_RUNNER_LOG_COLORS", True),
            log_payloads=cls._get_bool("PING_RUNNER_LOG_PAYLOADS", False),
            slow_threshold_ms=cls._get_int("PING_RUNNER_SLOW_THRESHOLD_MS", 1000),
            include_traceback=cls._get_bool("PING_RUNNER_INCLUDE_TRACEBACK", False),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get a positive integer from environment.

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
            parsed = int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

        if parsed <= 0:
            logger.warning("Non-positive value for %s: %d, using default %d", key, parsed, default)
            return default
        return parsed

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        """Get a positive, finite float from environment."""
        value = os.getenv(key)
        if value is None:
            return default

        try:
            parsed = float(value)
        except ValueError:
            logger.warning("Invalid float for %s: %s, using default %.1f", key, value, default)
            return default

        if not math.isfinite(parsed) or parsed <= 0:
            logger.warning("Out of range value for %s: %s, using default %.1f", key, value, default)
            return default
        return parsed

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
    def _get_transport() -> str:
        """Get transport from environment with validation.

        Returns:
            Transport type ("http" or "stdio")
        """
        transport = os.getenv("PING_RUNNER_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "http"
