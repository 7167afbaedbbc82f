"""Process-wide state for the MCP server layer."""

from ping_runner.config import Settings
from ping_runner.services.runner import ProcessRunner

# Global state (initialized on first access)
_settings: Settings | None = None
_runner: ProcessRunner | None = None


def get_settings() -> Settings:
    """Get or load settings from the environment."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_runner() -> ProcessRunner:
    """Get or create the shared runner."""
    global _runner
    if _runner is None:
        _runner = ProcessRunner(settings=get_settings())
    return _runner


def reset_state() -> None:
    """Reset global state for testing.

    Closes the shared runner's worker pool, then clears the singletons so
    tests start fresh. Should only be used in test fixtures.
    """
    global _settings, _runner
    if _runner is not None:
        _runner.close()
    _settings = None
    _runner = None


def set_settings(settings: Settings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def set_runner(runner: ProcessRunner) -> None:
    """Set the global runner instance.

    Args:
        runner: ProcessRunner instance to use globally.
    """
    global _runner
    _runner = runner
