"""Tests for the console log formatter."""

import logging
import sys

import pytest

from ping_runner.utils.console import COLORS, ColorfulFormatter, MCPRequestFormatter


def make_record(message: str, name: str = "ping_runner.services.runner", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, message, None, None)


class TestColorfulFormatter:
    """Tests for ColorfulFormatter."""

    def test_plain_output_has_columns(self) -> None:
        formatter = ColorfulFormatter(use_colors=False)

        line = formatter.format(make_record("ping exited with code 0"))

        parts = [p.strip() for p in line.split("|")]
        assert parts[1] == "INFO"
        assert parts[2] == "services.runner"
        assert parts[3] == "ping exited with code 0"
        assert "\033[" not in line

    def test_foreign_logger_name_kept(self) -> None:
        formatter = ColorfulFormatter(use_colors=False)

        line = formatter.format(make_record("hi", name="fastmcp.server"))

        assert "fastmcp.server" in line

    @pytest.mark.parametrize(
        ("message", "color"),
        [
            ("ping exited with code 0", COLORS["bright_green"]),
            ("ping exited with code 2", COLORS["bright_red"]),
        ],
    )
    def test_exit_codes_colored_by_result(self, message: str, color: str) -> None:
        formatter = ColorfulFormatter(use_colors=True)

        line = formatter.format(make_record(message))

        assert f"{color}{message[-1]}" in line

    def test_durations_highlighted(self) -> None:
        formatter = ColorfulFormatter(use_colors=True)

        line = formatter.format(make_record("<<< TOOL: ping -> 3 chars [12.5ms]"))

        assert f"{COLORS['bright_yellow']}12.5ms" in line

    def test_includes_exception_text(self) -> None:
        formatter = ColorfulFormatter(use_colors=False)
        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            record = logging.LogRecord("ping_runner", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

        assert "RuntimeError: kaboom" in formatter.format(record)


class TestMCPRequestFormatter:
    """Tests for MCPRequestFormatter markers."""

    @pytest.mark.parametrize(
        ("message", "marker"),
        [
            ("Ping runner server starting", ">>>"),
            ("Ping runner server shutting down", "<<<"),
            ("Failed to launch ping", "!!"),
            ("Cancelled while running: ping sleepy", "x"),
            ("Launching: ping -c 1 localhost", "+"),
        ],
    )
    def test_markers(self, message: str, marker: str) -> None:
        formatter = MCPRequestFormatter(use_colors=True)

        line = formatter.format(make_record(message))

        assert line.split(COLORS["reset"], 1)[0].endswith(marker)

    def test_no_markers_without_colors(self) -> None:
        formatter = MCPRequestFormatter(use_colors=False)

        line = formatter.format(make_record("Ping runner server starting"))

        assert not line.startswith(">>>")
