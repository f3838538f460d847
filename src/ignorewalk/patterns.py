"""
Compile gitignore-style pattern lines into anchored regular expressions.

A pattern read from `<dir>/.gitignore` is compiled against the absolute,
forward-slash form of `<dir>`, so a rule can only ever match paths inside
the directory that declared it. Matching is then a single `re.match` per rule
against the candidate's absolute path.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from ignorewalk.errors import MalformedPatternError

# Blank or comment-only lines.
_SKIP_RE = re.compile(r"^\s*(#.*)?$")

# Backslash before whitespace, not itself escaped.
_ESCAPED_SPACE_RE = re.compile(r"(?<!\\)((?:\\\\)*)\\(\s)")

_TOKEN_RE = re.compile(
    r"""
      (?P<bracket> \[ (?P<negate>[!^])?
          (?P<members> \](?:\\.|[^\]\\])* | (?:\\.|[^\]\\])+ ) \] )
    | (?P<globstar> /\*\*(?=/|$) )
    | (?P<star> \* )
    | (?P<question> \? )
    | (?P<literal> (?: \\. | [^\[*?/\\] | /(?!\*\*(?:/|$)) )+ )
    | (?P<raw> . )
    """,
    re.VERBOSE | re.DOTALL,
)

_MEMBER_RE = re.compile(r"\\(.)|(.)", re.DOTALL)
_UNESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


@dataclass(frozen=True)
class Rule:
    """
    One compiled ignore pattern.

    `pattern` matches absolute forward-slash paths. Rules that are not
    `directory_only` also match everything beneath a matched path.
    """

    negated: bool
    directory_only: bool
    pattern: re.Pattern[str]
    source: str = ""
    origin: Path | str | None = field(default=None, compare=False)
    line_number: int | None = field(default=None, compare=False)

    def matches(self, path: str) -> bool:
        return self.pattern.match(path) is not None

    def describe(self) -> str:
        """Human-readable location of the rule, for log messages."""
        if self.origin is None:
            return repr(self.source)
        if self.line_number is None:
            return f"{self.source!r} ({self.origin})"
        return f"{self.source!r} ({self.origin}:{self.line_number})"


def _translate_members(members: str) -> str:
    out: list[str] = []
    for m in _MEMBER_RE.finditer(members):
        escaped, char = m.groups()
        if escaped is not None:
            out.append(re.escape(escaped))
        elif char == "-":
            out.append(char)
        else:
            out.append(re.escape(char))
    return "".join(out)


def translate_glob(text: str) -> str:
    """
    Translate a glob into a regular expression fragment (no anchors).

    `/**` as a whole segment matches zero or more path segments, `*` matches a
    run of non-`/` characters and `?` exactly one. Bracket sets pass through,
    with `[!...]` becoming a negated class that never matches `/`; a `]` right
    after the opening `[` (or `[!`) is a literal member. Anything the
    tokenizer cannot place (such as an unclosed `[`) is emitted raw, leaving
    the regex engine to reject it.
    """
    parts: list[str] = []
    for m in _TOKEN_RE.finditer(text):
        kind = m.lastgroup
        if m.group("bracket") is not None:
            members = _translate_members(m.group("members"))
            if m.group("negate"):
                parts.append(f"[^{members}/]")
            else:
                parts.append(f"[{members}]")
        elif kind == "globstar":
            parts.append("(?:/.*)?")
        elif kind == "star":
            parts.append("[^/]*")
        elif kind == "question":
            parts.append("[^/]")
        elif kind == "literal":
            parts.append(re.escape(_UNESCAPE_RE.sub(r"\1", m.group())))
        else:
            parts.append(m.group())
    return "".join(parts)


def _anchor_prefix(directory: Path) -> str:
    # The filesystem root would otherwise contribute a second slash.
    return directory.as_posix().rstrip("/")


def _has_trailing_escape(text: str) -> bool:
    return (len(text) - len(text.rstrip("\\"))) % 2 == 1


def _trim_trailing_space(text: str) -> str:
    # An odd run of backslashes escapes the first trailing space (`foo\ `).
    trimmed = text.rstrip(" \t")
    if trimmed != text and _has_trailing_escape(trimmed):
        trimmed += text[len(trimmed)]
    return trimmed


def compile_rule(
    line: str,
    directory: Path,
    *,
    origin: Path | str | None = None,
    line_number: int | None = None,
) -> Rule | None:
    """
    Compile one ignore-file line declared in `directory` (an absolute path).

    Returns `None` for blank lines, comments, and lines with no pattern body.
    Raises `MalformedPatternError` if the pattern cannot be compiled.
    """
    text = _trim_trailing_space(line.rstrip("\r\n"))
    if _SKIP_RE.match(text):
        return None

    negated = text.startswith("!")
    if negated:
        text = text[1:]
    elif text.startswith(("\\!", "\\#")):
        text = text[1:]

    directory_only = text.endswith("/") and not _has_trailing_escape(text[:-1])
    if directory_only:
        text = text.rstrip("/")

    text = _ESCAPED_SPACE_RE.sub(r"\1\2", text)
    if not text:
        return None

    error_path = Path(origin) if origin is not None else directory
    if _has_trailing_escape(text):
        raise MalformedPatternError(error_path, line, "trailing backslash", line_number)

    glob = text if text.startswith("/") else f"/**/{text}"
    if not directory_only:
        glob += "/**"

    expression = rf"\A{re.escape(_anchor_prefix(directory))}{translate_glob(glob)}\Z"
    try:
        pattern = re.compile(expression, re.DOTALL)
    except re.error as e:
        raise MalformedPatternError(error_path, line, str(e), line_number) from e

    return Rule(
        negated=negated,
        directory_only=directory_only,
        pattern=pattern,
        source=line.rstrip("\r\n"),
        origin=origin,
        line_number=line_number,
    )
