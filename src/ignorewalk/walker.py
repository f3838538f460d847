"""
Walker: lazy, ignore-file-aware traversal of a directory tree.

The tree is walked depth first from an explicit work list rather than by
recursion. Each directory is visited twice: EXPAND lists it, reads its ignore
file, filters its children and queues the kept subdirectories; CONTRACT,
queued beneath those subdirectories, drops the directory's rules once its
whole subtree has been processed.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import closing
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from ignorewalk.defaults import CONFIG_ORIGIN
from ignorewalk.errors import DirectoryListError, IgnoreFileReadError, InvalidRootError
from ignorewalk.ignore_file import read_ignore_lines
from ignorewalk.rules import RuleStore
from ignorewalk.types import WalkConfig, WalkMode

log = logging.getLogger(__name__)


class Visit(Enum):
    EXPAND = "expand"
    CONTRACT = "contract"


@dataclass
class _Listing:
    """Children of one directory, in traversal order."""

    subdirs: list[Path]
    files: list[Path]
    ignore_file: Path | None


def _check_root(root: Path) -> Path:
    try:
        resolved = root.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise InvalidRootError(root, "Root does not exist") from e
    if not resolved.is_dir():
        raise InvalidRootError(root, "Root is not a directory")
    if not os.access(resolved, os.R_OK | os.X_OK):
        raise InvalidRootError(root, "Root is not readable")
    return resolved


class Walker:
    """
    Yields the paths under `root` that survive the ignore rules found in the
    tree, per `config`.

    Arguments and the root are checked on construction, so errors surface
    before any traversal. Each iteration starts a fresh walk with its own
    state, so one `Walker` can be iterated repeatedly.
    """

    def __init__(self, root: str | Path, config: WalkConfig | None = None) -> None:
        base = config if config is not None else WalkConfig()
        # Own copy, so later changes to the caller's config cannot bypass validation.
        self._config: WalkConfig = replace(base, exclude=list(base.exclude))
        self._config.validate()
        self.root: Path = _check_root(Path(root))

    @property
    def config(self) -> WalkConfig:
        return self._config

    def __iter__(self) -> Iterator[Path]:
        return self._walk()

    def _walk(self) -> Iterator[Path]:
        config = self._config
        store = RuleStore()
        # Rules each open directory contributed, removed on its CONTRACT visit.
        pending: dict[Path, int] = {}
        # (st_dev, st_ino) of entered directories; only tracked when following symlinks.
        entered: set[tuple[int, int]] = set()
        work: list[tuple[Visit, Path]] = [(Visit.EXPAND, self.root)]

        config_rules = store.enter_directory(
            self.root, config.effective_exclude, origin=CONFIG_ORIGIN
        )

        while work:
            visit, directory = work.pop()

            if visit is Visit.CONTRACT:
                store.exit_directory(pending.pop(directory))
                continue

            if config.follow_symlinks and not self._first_entry(directory, entered):
                continue

            if config.mode is WalkMode.DIRECTORIES and directory != self.root:
                yield directory

            listing = self._list_directory(directory)
            if listing is None:
                continue

            added = 0
            if listing.ignore_file is not None:
                added = self._load_rules(store, directory, listing.ignore_file)
            pending[directory] = added
            work.append((Visit.CONTRACT, directory))

            # Reversed so the work list pops subdirectories in listing order.
            kept = [d for d in listing.subdirs if self._is_kept(store, d, is_dir=True)]
            work.extend((Visit.EXPAND, d) for d in reversed(kept))

            if config.mode is WalkMode.FILES:
                for path in listing.files:
                    if self._is_kept(store, path, is_dir=False):
                        yield path

        store.exit_directory(config_rules)

    def _first_entry(self, directory: Path, entered: set[tuple[int, int]]) -> bool:
        try:
            st = directory.stat()
        except OSError as e:
            self._unreadable(DirectoryListError(directory, e.strerror or str(e)), e)
            return False
        key = (st.st_dev, st.st_ino)
        if key in entered:
            log.debug("Already visited %s, not entering again", directory)
            return False
        entered.add(key)
        return True

    def _list_directory(self, directory: Path) -> _Listing | None:
        config = self._config
        listing = _Listing(subdirs=[], files=[], ignore_file=None)
        try:
            with os.scandir(directory) as it:
                entries = list(it)
                if config.sort:
                    entries.sort(key=lambda entry: entry.name)
                for entry in entries:
                    path = directory / entry.name
                    if entry.is_dir(follow_symlinks=config.follow_symlinks):
                        listing.subdirs.append(path)
                        continue
                    # Opened even if it is not a regular file, so a dangling
                    # link is reported as an unreadable ignore file.
                    if entry.name == config.ignore_file_name:
                        listing.ignore_file = path
                        if not config.include_ignore_files:
                            continue
                    listing.files.append(path)
        except OSError as e:
            self._unreadable(DirectoryListError(directory, e.strerror or str(e)), e)
            return None
        return listing

    def _load_rules(self, store: RuleStore, directory: Path, ignore_file: Path) -> int:
        try:
            with closing(read_ignore_lines(ignore_file)) as lines:
                return store.enter_directory(directory, lines, origin=ignore_file)
        except IgnoreFileReadError as e:
            if not self._config.skip_unreadable:
                raise
            log.warning("%s; skipping", e)
            return 0

    def _unreadable(self, error: DirectoryListError, cause: OSError) -> None:
        if not self._config.skip_unreadable:
            raise error from cause
        log.warning("%s; skipping", error)

    def _is_kept(self, store: RuleStore, path: Path, *, is_dir: bool) -> bool:
        rule = store.match(path.as_posix(), is_dir=is_dir)
        if rule is None:
            return True
        if rule.negated:
            log.debug("Re-included %s by %s", path, rule.describe())
        else:
            log.debug("Excluded %s%s by %s", path, "/" if is_dir else "", rule.describe())
        return rule.negated


def walk(
    root: str | Path,
    ignore_file_name: str | None = None,
    mode: WalkMode | str | None = None,
    include_ignore_files: bool | None = None,
    *,
    config: WalkConfig | None = None,
) -> Iterator[Path]:
    """
    Lazily yield absolute paths under `root` that are not excluded by ignore
    files named `ignore_file_name` found in the tree.

    In `WalkMode.FILES` (the default) files are yielded; in
    `WalkMode.DIRECTORIES` the kept directories below the root are yielded
    instead. Arguments that are not `None` override the matching fields of
    `config`.

    Raises `InvalidRootError` or `ValueError` immediately, before the first
    path is requested. Errors met during traversal are raised from the
    iterator.
    """
    overrides: dict[str, object] = {}
    if ignore_file_name is not None:
        overrides["ignore_file_name"] = ignore_file_name
    if mode is not None:
        overrides["mode"] = WalkMode(mode)
    if include_ignore_files is not None:
        overrides["include_ignore_files"] = include_ignore_files
    base = config if config is not None else WalkConfig()
    return iter(Walker(root, replace(base, **overrides)))
