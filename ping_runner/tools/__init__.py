"""MCP tools for the ping runner."""

from ping_runner.tools.ping import ping, ping_hosts

__all__ = ["ping", "ping_hosts"]
