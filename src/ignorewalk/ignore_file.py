"""Reading ignore files one line at a time."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from ignorewalk.errors import IgnoreFileReadError


def read_ignore_lines(path: Path) -> Iterator[tuple[int, str]]:
    """
    Yield `(line_number, line)` pairs from the ignore file at `path`, with line
    endings removed. Line numbers start at 1.

    The file stays open only while the caller iterates and is closed on every
    exit path, including an exception raised by the caller between lines.
    Read and decode failures are raised as `IgnoreFileReadError`.
    """
    try:
        with path.open(encoding="utf-8") as f:
            for number, line in enumerate(f, start=1):
                yield number, line.rstrip("\r\n")
    except (OSError, UnicodeDecodeError) as e:
        raise IgnoreFileReadError(path, str(e)) from e
