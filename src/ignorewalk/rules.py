"""
The set of rules active at one point of a walk.

Rules are inserted at the front as ignore files are read, so the most recently
declared rule is checked first. A directory's rules are removed again by count
when its subtree is finished; since removal always takes the newest rules,
nothing but that count needs to be remembered.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from pathlib import Path

from ignorewalk.patterns import Rule, compile_rule

log = logging.getLogger(__name__)


class RuleStore:
    """Ordered rules for the open chain of directories, newest first."""

    def __init__(self) -> None:
        self._rules: deque[Rule] = deque()

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def enter_directory(
        self,
        directory: Path,
        lines: Iterable[tuple[int, str]] | Iterable[str],
        *,
        origin: Path | str | None = None,
    ) -> int:
        """
        Compile `lines` declared in `directory` and make them active.

        `lines` are either plain strings or `(line_number, line)` pairs, in file
        order. Returns how many rules were added; pass that to `exit_directory`.
        If a line fails to compile, rules already added from `lines` are removed
        before the error propagates.
        """
        added = 0
        try:
            for item in lines:
                if isinstance(item, tuple):
                    line_number, line = item
                else:
                    line_number, line = None, item
                rule = compile_rule(line, directory, origin=origin, line_number=line_number)
                if rule is not None:
                    self._rules.appendleft(rule)
                    added += 1
        except BaseException:
            self.exit_directory(added)
            raise
        if added:
            log.debug("Loaded %d rules from %s", added, origin or directory)
        return added

    def exit_directory(self, count: int) -> None:
        """Remove the `count` most recently added rules."""
        if count > len(self._rules):
            raise ValueError(f"Cannot remove {count} rules, only {len(self._rules)} active")
        for _ in range(count):
            self._rules.popleft()

    def match(self, path: str, *, is_dir: bool) -> Rule | None:
        """
        Return the highest-precedence rule matching `path`, or `None`.
        Directory-only rules are skipped unless `is_dir` is true.
        """
        for rule in self._rules:
            if rule.directory_only and not is_dir:
                continue
            if rule.matches(path):
                return rule
        return None

    def is_included(self, path: str, *, is_dir: bool) -> bool:
        """Nothing is excluded unless a rule says so; a negated rule re-includes."""
        rule = self.match(path, is_dir=is_dir)
        return rule is None or rule.negated
