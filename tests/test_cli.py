"""CLI integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from ignorewalk.cli import _parse_args, main  # pyright: ignore[reportPrivateUsage]


def _make_tree(root: Path) -> None:
    """Create a minimal project directory tree for testing."""
    (root / "README.md").write_text("# Root\n")
    (root / ".gitignore").write_text("*.log\nbuild/\n")
    docs = root / "docs"
    docs.mkdir()
    (docs / "guide.md").write_text("# Guide\n")
    (docs / "debug.log").write_text("log\n")
    build = root / "build"
    build.mkdir()
    (build / "out.md").write_text("# Built\n")
    git = root / ".git"
    git.mkdir()
    (git / "HEAD").write_text("ref: refs/heads/main\n")


def _names(out: str) -> list[str]:
    return [Path(line).name for line in out.splitlines() if line]


def _run(args: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, str, str]:
    code = main(args)
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_help_includes_usage(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "ignorewalk: list the files under a directory" in out
    assert "Common usage:" in out
    assert "--ignore-file" in out


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(["--version"], capsys)
    assert code == 0
    assert out.startswith("v") or out.startswith("unknown")


def test_lists_files(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    code, out, _ = _run(["."], capsys)
    assert code == 0
    assert _names(out) == ["README.md", "HEAD", "guide.md"]


def test_default_root_is_cwd(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    code, out, _ = _run([], capsys)
    assert code == 0
    assert "README.md" in out
    assert "debug.log" not in out


def test_exclude_vcs_and_extra_patterns(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    code, out, _ = _run([str(tmp_path), "--exclude-vcs", "--exclude", "docs/"], capsys)
    assert code == 0
    assert _names(out) == ["README.md"]


def test_directories(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    code, out, _ = _run([str(tmp_path), "--directories", "--exclude-vcs"], capsys)
    assert code == 0
    assert _names(out) == ["docs"]


def test_include_ignore_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    code, out, _ = _run([str(tmp_path), "--include-ignore-files", "--exclude-vcs"], capsys)
    assert code == 0
    assert _names(out) == [".gitignore", "README.md", "guide.md"]


def test_custom_ignore_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".dockerignore").write_text("docs/\n.git/\n")
    code, out, _ = _run([str(tmp_path), "--ignore-file", ".dockerignore"], capsys)
    assert code == 0
    assert _names(out) == [".gitignore", "README.md", "out.md"]


def test_print0(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "a.txt").write_text("a\n")
    (tmp_path / "b.txt").write_text("b\n")
    code, out, _ = _run([str(tmp_path), "-0"], capsys)
    assert code == 0
    assert out.split("\0") == [
        str(tmp_path.resolve() / "a.txt"),
        str(tmp_path.resolve() / "b.txt"),
        "",
    ]


def test_config_file_applies(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".ignorewalk.toml").write_text('exclude-vcs = true\nexclude = ["docs/"]\n')
    monkeypatch.chdir(tmp_path)
    code, out, _ = _run(["."], capsys)
    assert code == 0
    # The config file itself is an ordinary file in the tree.
    assert _names(out) == [".ignorewalk.toml", "README.md"]


def test_explicit_flag_overrides_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".ignorewalk.toml").write_text('exclude-vcs = true\nexclude = ["docs/"]\n')
    monkeypatch.chdir(tmp_path)
    code, out, _ = _run([".", "--exclude", "README.md"], capsys)
    assert code == 0
    assert _names(out) == [".ignorewalk.toml", "guide.md"]


def test_bad_config_exits_1(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "ignorewalk.toml").write_text("not toml [[[")
    monkeypatch.chdir(tmp_path)
    code, _, err = _run(["."], capsys)
    assert code == 1
    assert err.startswith("Error: Invalid config file")


def test_directories_with_include_ignore_files_exits_1(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code, out, err = _run([str(tmp_path), "--directories", "--include-ignore-files"], capsys)
    assert code == 1
    assert out == ""
    assert "Error:" in err


def test_missing_root_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, err = _run([str(tmp_path / "nope")], capsys)
    assert code == 2
    assert out == ""
    assert "Root does not exist" in err


def test_malformed_pattern_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "a.txt").write_text("a\n")
    (tmp_path / ".gitignore").write_text("[oops\n")
    code, out, err = _run([str(tmp_path)], capsys)
    assert code == 2
    assert out == ""
    assert "Malformed pattern" in err


def test_explicit_flag_detection_with_default_value(tmp_path: Path) -> None:
    """Passing a flag at its default value still counts as explicit."""
    _, explicit_flags = _parse_args(["--ignore-file", ".gitignore", str(tmp_path)])
    assert "ignore_file" in explicit_flags
    assert "exclude" not in explicit_flags


def test_no_sort_flag(tmp_path: Path) -> None:
    options, explicit_flags = _parse_args(["--no-sort", str(tmp_path)])
    assert options.sort is False
    assert "sort" in explicit_flags
    options, _ = _parse_args([str(tmp_path)])
    assert options.sort is True
