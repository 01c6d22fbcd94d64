from __future__ import annotations

from pathlib import Path

import pytest

from toprompt.ignore import Pattern, PatternSet, glob_match, load_gitignore


@pytest.mark.parametrize(
    "glob, text, expected",
    [
        ("*.log", "debug.log", True),
        ("*.log", "debug.txt", False),
        ("?.py", "a.py", True),
        ("?.py", "ab.py", False),
        ("build", "build", True),
        ("Build", "build", False),
        ("", "", True),
        ("", "x", False),
        ("*", "anything", True),
        ("*", "a/b", False),
        ("[ab].py", "[ab].py", True),
        ("[ab].py", "a.py", False),
        ("docs/*.md", "docs/intro.md", True),
        ("a*z", "a/b/z", True),
    ],
)
def test_glob_match(glob: str, text: str, expected: bool) -> None:
    assert glob_match(glob, text) is expected


def test_parse_flags(tmp_path: Path) -> None:
    p = Pattern.parse("!/build/", tmp_path)
    assert p is not None
    assert p.glob == "build"
    assert p.negated and p.anchored and p.directory_only
    assert not p.has_slash
    assert p.defined_in == tmp_path
    assert str(p) == "!/build/"


@pytest.mark.parametrize("line", ["", "   ", "# comment", "  # indented comment", "!", "/"])
def test_parse_inert_lines(tmp_path: Path, line: str) -> None:
    assert Pattern.parse(line, tmp_path) is None


def test_has_slash(tmp_path: Path) -> None:
    p = Pattern.parse("docs/build", tmp_path)
    assert p is not None and p.has_slash


def test_negation_order(tmp_path: Path) -> None:
    rules = PatternSet.from_lines(["*.log", "!keep.log"], tmp_path)
    assert rules.should_ignore("other.log", False) is True
    assert rules.should_ignore("keep.log", False) is False

    reversed_rules = PatternSet.from_lines(["!keep.log", "*.log"], tmp_path)
    assert reversed_rules.should_ignore("keep.log", False) is True


def test_negation_reincludes_tmp(tmp_path: Path) -> None:
    rules = PatternSet.from_lines(["*.tmp", "!important.tmp"], tmp_path)
    assert rules.should_ignore("a.tmp", False) is True
    assert rules.should_ignore("important.tmp", False) is False


def test_anchored_vs_unanchored(tmp_path: Path) -> None:
    anchored = PatternSet.from_lines(["/build"], tmp_path)
    assert anchored.should_ignore("build", True) is True
    assert anchored.should_ignore("src/build", True) is False

    anywhere = PatternSet.from_lines(["build"], tmp_path)
    assert anywhere.should_ignore("build", True) is True
    assert anywhere.should_ignore("src/build", True) is True
    assert anywhere.should_ignore("src/deep/build", False) is True


def test_directory_only(tmp_path: Path) -> None:
    rules = PatternSet.from_lines(["out/"], tmp_path)
    assert rules.should_ignore("out", True) is True
    assert rules.should_ignore("out", False) is False


def test_slash_pattern_matches_full_path_only(tmp_path: Path) -> None:
    rules = PatternSet.from_lines(["docs/*.md"], tmp_path)
    assert rules.should_ignore("docs/intro.md", False) is True
    assert rules.should_ignore("intro.md", False) is False
    assert rules.should_ignore("src/docs/intro.md", False) is False


def test_bare_name_matches_any_directory_component(tmp_path: Path) -> None:
    rules = PatternSet.from_lines(["vendor"], tmp_path)
    assert rules.should_ignore("vendor/lib", True) is True
    assert rules.should_ignore("vendor/lib.py", False) is False


def test_rules_are_scoped_to_their_directory(tmp_path: Path) -> None:
    root = PatternSet.empty(tmp_path)
    local = PatternSet.from_lines(["/gen", "*.txt"], tmp_path / "sub", root=tmp_path)
    rules = root.merge(local)

    assert rules.should_ignore("sub/gen", True) is True
    assert rules.should_ignore("gen", True) is False
    assert rules.should_ignore("sub/notes.txt", False) is True
    assert rules.should_ignore("notes.txt", False) is False
    assert rules.should_ignore("other/notes.txt", False) is False


def test_defaults(tmp_path: Path) -> None:
    rules = PatternSet.with_defaults(tmp_path)
    assert rules.should_ignore(".git", True) is True
    assert rules.should_ignore(".git", False) is False
    assert rules.should_ignore(".gitignore", False) is True
    assert rules.should_ignore("sub/.gitignore", False) is True
    assert rules.should_ignore("main.py", False) is False


def test_merge_does_not_touch_operands(tmp_path: Path) -> None:
    parent = PatternSet.from_lines(["*.log"], tmp_path)
    child = PatternSet.from_lines(["!keep.log"], tmp_path)
    merged = parent.merge(child)

    assert [str(p) for p in merged.patterns] == ["*.log", "!keep.log"]
    assert len(parent) == 1
    assert parent.should_ignore("keep.log", False) is True
    assert merged.should_ignore("keep.log", False) is False


def test_load_gitignore_missing(tmp_path: Path) -> None:
    rules = load_gitignore(tmp_path)
    assert len(rules) == 0
    assert rules.root == tmp_path


def test_load_gitignore_skips_comments_and_blanks(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("# build output\n\n*.o\n  \n!main.o\n", encoding="utf-8")
    rules = load_gitignore(tmp_path)
    assert [str(p) for p in rules.patterns] == ["*.o", "!main.o"]
    assert all(p.defined_in == tmp_path for p in rules.patterns)


def test_load_gitignore_undecodable(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / ".gitignore").write_bytes(b"\xff\xfe*.log\n")
    rules = load_gitignore(tmp_path)
    assert len(rules) == 0
    assert "Could not read .gitignore" in capsys.readouterr().err


def test_star_crosses_slash_in_path_rules(tmp_path: Path) -> None:
    rules = PatternSet.from_lines(["/src*.py"], tmp_path)
    assert rules.should_ignore("src/pkg/x.py", False) is True

    bare = PatternSet.from_lines(["*"], tmp_path)
    assert bare.should_ignore("src/pkg/x.py", False) is True
    anchored_star = PatternSet.from_lines(["/*"], tmp_path)
    assert anchored_star.should_ignore("src/pkg/x.py", False) is False


def test_load_gitignore_unreadable(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / ".gitignore").mkdir()
    rules = load_gitignore(tmp_path)
    assert len(rules) == 0
    assert "Could not read .gitignore" in capsys.readouterr().err
