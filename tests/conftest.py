"""Shared fixtures: a scriptable stand-in for the ping binary."""

import stat
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from ping_runner.config import Settings
from ping_runner.services import ProcessRunner, reset_state

# Behaves like iputils ping for the arguments the tests use. Special hosts:
#   badaddress  - resolution failure on stderr, exit 1
#   sleepy      - writes its pid to $PING_PIDFILE, then sleeps
#   stubborn    - like sleepy but ignores SIGTERM
#   noisy       - one reply on stdout, one warning on stderr
FAKE_PING = r"""#!/bin/sh
count=4
host=""
while [ $# -gt 0 ]; do
    case "$1" in
        -c|-n) count="$2"; shift 2 ;;
        -*) shift ;;
        *) host="$1"; shift ;;
    esac
done

case "$count" in
    ''|*[!0-9]*) echo "ping: invalid argument: '$count'" >&2; exit 1 ;;
esac

case "$host" in
    "")
        echo "ping: usage error: Destination address required" >&2
        exit 1 ;;
    badaddress)
        echo "ping: badaddress: Name or service not known" >&2
        exit 1 ;;
    sleepy)
        echo $$ > "$PING_PIDFILE"
        exec sleep 30 ;;
    stubborn)
        trap '' TERM
        echo $$ > "$PING_PIDFILE"
        while :; do sleep 0.1; done ;;
    noisy)
        echo "64 bytes from noisy (127.0.0.1): icmp_seq=1 ttl=64 time=0.040 ms"
        echo "ping: warning: noisy is noisy" >&2
        exit 0 ;;
esac

echo "PING $host (127.0.0.1) 56(84) bytes of data."
i=1
while [ "$i" -le "$count" ]; do
    echo "64 bytes from $host (127.0.0.1): icmp_seq=$i ttl=64 time=0.040 ms"
    i=$((i + 1))
done
echo ""
echo "--- $host ping statistics ---"
echo "$count packets transmitted, $count received, 0% packet loss"
exit 0
"""


@pytest.fixture
def fake_ping(tmp_path: Path) -> Path:
    """Write an executable fake ping script and return its path."""
    if sys.platform == "win32":
        pytest.skip("fake ping is a POSIX shell script")

    script = tmp_path / "ping"
    script.write_text(FAKE_PING)
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def pidfile(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Path where the sleepy/stubborn fake hosts record their pid."""
    path = tmp_path / "ping.pid"
    monkeypatch.setenv("PING_PIDFILE", str(path))
    return path


@pytest.fixture
def runner(fake_ping: Path) -> Iterator[ProcessRunner]:
    """ProcessRunner wired to the fake ping script."""
    settings = Settings(command=str(fake_ping), terminate_grace=0.5)
    with ProcessRunner(settings=settings) as r:
        yield r


@pytest.fixture(autouse=True)
def reset_globals() -> Iterator[None]:
    """Reset global state around each test."""
    reset_state()
    yield
    reset_state()

