#!/usr/bin/env python3
"""
ignorewalk: list the files under a directory, honoring nested ignore files

Common usage:
  ignorewalk .
  ignorewalk src --ignore-file .dockerignore
  ignorewalk . --directories
  ignorewalk . --exclude '*.pyc' --exclude-vcs -0 | xargs -0 wc -l

Rules in an ignore file apply to the directory holding it and everything
below it, with gitignore syntax and last-match-wins precedence. Settings can
also come from `.ignorewalk.toml`, `ignorewalk.toml`, or `[tool.ignorewalk]`
in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from ignorewalk.config import find_config_file, load_config, merge_cli_with_config
from ignorewalk.defaults import DEFAULT_IGNORE_FILE_NAME
from ignorewalk.errors import ConfigError, IgnoreWalkError
from ignorewalk.types import WalkConfig, WalkMode
from ignorewalk.walker import Walker

log = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the ignorewalk tool."""

    root: str
    ignore_file: str
    directories: bool
    include_ignore_files: bool
    exclude: list[str]
    exclude_vcs: bool
    sort: bool
    follow_symlinks: bool
    skip_unreadable: bool
    print0: bool
    verbose: int
    version: bool

    def to_walk_config(self) -> WalkConfig:
        return WalkConfig(
            ignore_file_name=self.ignore_file,
            mode=WalkMode.DIRECTORIES if self.directories else WalkMode.FILES,
            include_ignore_files=self.include_ignore_files,
            exclude=list(self.exclude),
            exclude_vcs=self.exclude_vcs,
            sort=self.sort,
            follow_symlinks=self.follow_symlinks,
            skip_unreadable=self.skip_unreadable,
        )


# Flags that a config file may also set. Their parser default is None so that
# an explicitly passed flag can be told apart from one left at its default.
_TRACKED_DEFAULTS: dict[str, object] = {
    "ignore_file": DEFAULT_IGNORE_FILE_NAME,
    "directories": False,
    "include_ignore_files": False,
    "exclude": [],
    "exclude_vcs": False,
    "sort": True,
    "follow_symlinks": False,
    "skip_unreadable": False,
}


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags`
    tracks which flags the user explicitly passed (for config merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="ignorewalk",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Directory to walk (default: current directory)",
    )
    parser.add_argument(
        "--ignore-file",
        dest="ignore_file",
        default=None,
        metavar="NAME",
        help=f"Name of the ignore files to honor (default: {DEFAULT_IGNORE_FILE_NAME})",
    )
    parser.add_argument(
        "-d",
        "--directories",
        action="store_true",
        default=None,
        help="List the directories that survive filtering instead of files",
    )
    parser.add_argument(
        "--include-ignore-files",
        action="store_true",
        dest="include_ignore_files",
        default=None,
        help="Also list the ignore files themselves, unless a rule excludes them",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Extra gitignore pattern applied from the root (lowest precedence). Can be repeated",
    )
    parser.add_argument(
        "--exclude-vcs",
        action="store_true",
        dest="exclude_vcs",
        default=None,
        help="Skip version control directories such as .git/ and .hg/",
    )
    parser.add_argument(
        "--no-sort",
        action="store_false",
        dest="sort",
        default=None,
        help="Keep the filesystem's listing order instead of sorting entries by name",
    )
    parser.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        dest="follow_symlinks",
        default=None,
        help="Descend into symlinked directories (each directory is entered once)",
    )
    parser.add_argument(
        "--skip-unreadable",
        action="store_true",
        dest="skip_unreadable",
        default=None,
        help="Warn about and skip unreadable directories and ignore files instead of failing",
    )
    parser.add_argument(
        "-0",
        "--print0",
        action="store_true",
        help="Separate output paths with NUL instead of newline",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log to stderr; repeat for debug output on every excluded path",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    explicit_flags: set[str] = set()
    for name, default in _TRACKED_DEFAULTS.items():
        if getattr(opts, name) is None:
            setattr(opts, name, list(default) if isinstance(default, list) else default)
        else:
            explicit_flags.add(name)

    return (
        Options(
            root=opts.root,
            ignore_file=opts.ignore_file,
            directories=opts.directories,
            include_ignore_files=opts.include_ignore_files,
            exclude=opts.exclude,
            exclude_vcs=opts.exclude_vcs,
            sort=opts.sort,
            follow_symlinks=opts.follow_symlinks,
            skip_unreadable=opts.skip_unreadable,
            print0=opts.print0,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _configure_logging(verbose: int) -> None:
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the ignorewalk CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for usage or config errors, 2 for walk errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("ignorewalk")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    _configure_logging(options.verbose)

    try:
        config_path = find_config_file(Path.cwd())
        if config_path:
            log.info("Using config file %s", config_path)
            merge_cli_with_config(options, load_config(config_path), explicit_flags)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        walker = Walker(options.root, options.to_walk_config())
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except IgnoreWalkError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    end = "\0" if options.print0 else "\n"
    try:
        for path in walker:
            print(path, end=end)
    except IgnoreWalkError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except BrokenPipeError:
        # The reader went away (e.g. `| head`); stop quietly.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
