"""Ping invocation data models."""

from collections.abc import Iterator
from dataclasses import dataclass

# Substrings the diagnostic tool prints for a reply (Unix / Windows)
SUCCESS_INDICATORS = ("bytes from", "reply from")

# Substrings printed when the target name cannot be resolved
FAILURE_INDICATORS = ("find host", "not known")


@dataclass(frozen=True)
class PingResult:
    """Result of one completed ping invocation.

    The exit code is passed through from the tool untouched. Unpacks like a
    tuple: ``exit_code, std_output = runner.run("-c 4 localhost")``.
    """

    exit_code: int
    std_output: str | None = None

    def __iter__(self) -> Iterator[int | str | None]:
        yield self.exit_code
        yield self.std_output

    @property
    def succeeded(self) -> bool:
        """Whether the tool reported success."""
        return self.exit_code == 0

    def success_lines(self) -> list[str]:
        """Output lines carrying a success indicator."""
        if not self.std_output:
            return []
        return [
            line
            for line in self.std_output.splitlines()
            if any(marker in line.lower() for marker in SUCCESS_INDICATORS)
        ]

    def indicates_unknown_host(self) -> bool:
        """Whether the output reports an unresolvable host."""
        if not self.std_output:
            return False
        text = self.std_output.lower()
        return any(marker in text for marker in FAILURE_INDICATORS)
