"""Configuration for the ping runner."""

from ping_runner.config.settings import Settings

__all__ = ["Settings"]
