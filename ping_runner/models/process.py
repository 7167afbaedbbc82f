"""Process launch descriptor."""

import shlex
from collections.abc import Sequence
from dataclasses import dataclass, field


def split_arguments(arguments: str | Sequence[str]) -> list[str]:
    """Normalize arguments to a list.

    A single string is split with shell-like rules (it is never handed to a
    shell). A sequence is passed through verbatim.
    """
    if isinstance(arguments, str):
        return shlex.split(arguments)
    return [str(arg) for arg in arguments]


@dataclass(frozen=True)
class ProcessStartInfo:
    """Describes a single child process launch."""

    command: str
    arguments: str | Sequence[str] = field(default_factory=tuple)
    cwd: str | None = None
    env: dict[str, str] | None = None

    def argv(self) -> list[str]:
        """Full argument vector, command first."""
        return [self.command, *split_arguments(self.arguments)]
