"""
Default ignore file name and opt-in exclusion patterns.

These patterns use gitignore syntax. Directory patterns end with `/`.
"""

from __future__ import annotations

DEFAULT_IGNORE_FILE_NAME = ".gitignore"

# Version control metadata directories. Only applied when `exclude_vcs` is set;
# a walk with no rules otherwise lists everything.
DEFAULT_VCS_EXCLUDES: list[str] = [
    ".git/",
    ".hg/",
    ".svn/",
    ".bzr/",
    "_darcs/",
    "CVS/",
]

# Label used as the origin of rules that come from configuration, not a file.
CONFIG_ORIGIN = "<config>"
