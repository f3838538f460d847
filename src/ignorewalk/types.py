"""Configuration types for a walk."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ignorewalk.defaults import DEFAULT_IGNORE_FILE_NAME, DEFAULT_VCS_EXCLUDES


class WalkMode(str, Enum):
    """What a walk yields."""

    FILES = "files"
    DIRECTORIES = "directories"


@dataclass
class WalkConfig:
    """
    Options for a walk.

    `ignore_file_name` is matched verbatim against file names (it is not a glob).
    `exclude` patterns are declared at the root, ahead of the root's own ignore
    file, so rules in that file take precedence over them.
    `include_ignore_files` only applies to `WalkMode.FILES`.
    """

    ignore_file_name: str = DEFAULT_IGNORE_FILE_NAME
    mode: WalkMode = WalkMode.FILES
    include_ignore_files: bool = False
    exclude: list[str] = field(default_factory=list)
    exclude_vcs: bool = False
    sort: bool = True
    follow_symlinks: bool = False
    skip_unreadable: bool = False

    def __post_init__(self) -> None:
        self.mode = WalkMode(self.mode)

    @property
    def effective_exclude(self) -> list[str]:
        """Root-level patterns: VCS defaults (if enabled) + `exclude`."""
        base = list(DEFAULT_VCS_EXCLUDES) if self.exclude_vcs else []
        return base + self.exclude

    def validate(self) -> None:
        if not self.ignore_file_name or "/" in self.ignore_file_name:
            raise ValueError(f"Invalid ignore file name: {self.ignore_file_name!r}")
        if self.mode is WalkMode.DIRECTORIES and self.include_ignore_files:
            raise ValueError("include_ignore_files cannot be combined with directory mode")
