"""
Lazy directory walking with nested, gitignore-style ignore files.

Rules in an ignore file apply to the directory holding it and its subtree.
Later rules take precedence over earlier ones, deeper files over shallower
ones, and an excluded directory is never entered.

Usage::

    from ignorewalk import walk, WalkMode

    for path in walk("project", ".gitignore"):
        print(path)

    for directory in walk("project", mode=WalkMode.DIRECTORIES):
        print(directory)
"""

from ignorewalk.errors import (
    ConfigError,
    DirectoryListError,
    IgnoreFileReadError,
    IgnoreWalkError,
    InvalidRootError,
    MalformedPatternError,
    UnreadableEntryError,
)
from ignorewalk.patterns import Rule, compile_rule
from ignorewalk.rules import RuleStore
from ignorewalk.types import WalkConfig, WalkMode
from ignorewalk.walker import Walker, walk

__all__ = [
    "ConfigError",
    "DirectoryListError",
    "IgnoreFileReadError",
    "IgnoreWalkError",
    "InvalidRootError",
    "MalformedPatternError",
    "Rule",
    "RuleStore",
    "UnreadableEntryError",
    "WalkConfig",
    "WalkMode",
    "Walker",
    "compile_rule",
    "walk",
]
