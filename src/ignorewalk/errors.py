"""Error types raised while walking a tree."""

from __future__ import annotations

from pathlib import Path


class IgnoreWalkError(Exception):
    """Base error for a failed walk. Carries the offending path."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class InvalidRootError(IgnoreWalkError):
    """The walk root does not exist or is not a directory."""


class UnreadableEntryError(IgnoreWalkError):
    """A directory or file could not be read partway through a walk."""


class DirectoryListError(UnreadableEntryError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Could not enumerate directory ({detail})")


class IgnoreFileReadError(UnreadableEntryError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Could not read ignore rules ({detail})")


class MalformedPatternError(IgnoreWalkError):
    """An ignore pattern could not be compiled into a matcher."""

    def __init__(
        self, path: Path, pattern: str, detail: str, line_number: int | None = None
    ) -> None:
        self.pattern = pattern
        self.detail = detail
        self.line_number = line_number
        where = f"line {line_number}, " if line_number is not None else ""
        super().__init__(path=path, message=f"Malformed pattern {pattern!r} ({where}{detail})")


class ConfigError(IgnoreWalkError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config file ({detail})")
