"""
Gitignore-style exclusion rules.

A :class:`Pattern` is one parsed rule line, a :class:`PatternSet` is the
ordered stack of rules in force for a directory. Sets are immutable: a
child directory layers its own ``.gitignore`` on top of the inherited set
with :meth:`PatternSet.merge`, which returns a new set and leaves the
parent's untouched.

Supported syntax is a subset of Git's: ``#`` comments, ``!`` negation,
leading ``/`` anchoring, trailing ``/`` directory-only rules and the
``*`` / ``?`` wildcards. There is no ``**`` and no ``[...]`` class.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePath
from typing import Iterable, Optional, Tuple, Union

from .core import warn

GITIGNORE_NAME = ".gitignore"
DEFAULT_PATTERNS: Tuple[str, ...] = (".git/", GITIGNORE_NAME)

PathLike = Union[str, PurePath]


# Glob matching
@lru_cache(maxsize=512)
def _compile_glob(glob: str) -> "re.Pattern[str]":
    parts = []
    for ch in glob:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.DOTALL)


def glob_match(glob: str, text: str) -> bool:
    """Match *text* against *glob* using ``*`` and ``?`` wildcards.

    A glob consisting only of stars matches any text without a ``/``.
    Elsewhere ``*`` is allowed to run across ``/``.
    """
    if glob and glob.strip("*") == "":
        return "/" not in text
    return _compile_glob(glob).fullmatch(text) is not None


# Single rule
@dataclass(frozen=True)
class Pattern:
    glob: str
    negated: bool
    anchored: bool
    directory_only: bool
    defined_in: Path

    @property
    def has_slash(self) -> bool:
        return "/" in self.glob

    @classmethod
    def parse(cls, line: str, defined_in: Path) -> Optional["Pattern"]:
        """Parse one ignore-file line, or return ``None`` for blanks and comments."""
        text = line.strip()
        if not text or text.startswith("#"):
            return None

        negated = text.startswith("!")
        if negated:
            text = text[1:]
        anchored = text.startswith("/")
        if anchored:
            text = text[1:]
        directory_only = text.endswith("/")
        if directory_only:
            text = text[:-1]

        if not text:
            return None
        return cls(
            glob=text,
            negated=negated,
            anchored=anchored,
            directory_only=directory_only,
            defined_in=Path(defined_in),
        )

    def scoped(self, path: PurePath) -> Optional[str]:
        """Return *path* relative to this rule's directory, or ``None`` if outside it."""
        try:
            rel = path.relative_to(self.defined_in)
        except ValueError:
            return None
        rel_str = rel.as_posix()
        if rel_str == ".":
            return None
        return rel_str

    def matches(self, path: str, is_dir: bool) -> bool:
        """Whether *path* (POSIX, relative to ``defined_in``) is matched by this rule."""
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            return glob_match(self.glob, path)

        components = path.split("/")
        if glob_match(self.glob, components[-1]):
            return True
        return is_dir and any(glob_match(self.glob, c) for c in components)

    def __str__(self) -> str:
        return (
            ("!" if self.negated else "")
            + ("/" if self.anchored else "")
            + self.glob
            + ("/" if self.directory_only else "")
        )


# Ordered rule stack
@dataclass(frozen=True)
class PatternSet:
    root: Path
    patterns: Tuple[Pattern, ...] = ()

    @classmethod
    def empty(cls, root: Path) -> "PatternSet":
        return cls(root=Path(root))

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        defined_in: Path,
        root: Optional[Path] = None,
    ) -> "PatternSet":
        parsed = (Pattern.parse(ln, defined_in) for ln in lines)
        return cls(
            root=Path(root if root is not None else defined_in),
            patterns=tuple(p for p in parsed if p is not None),
        )

    @classmethod
    def with_defaults(cls, base_dir: Path) -> "PatternSet":
        """Rules that are always on in gitignore mode: ``.git/`` and ``.gitignore``."""
        return cls.from_lines(DEFAULT_PATTERNS, defined_in=base_dir, root=base_dir)

    def merge(self, other: "PatternSet") -> "PatternSet":
        """Return a new set with *other*'s rules appended after ours."""
        if not other.patterns:
            return self
        return PatternSet(root=self.root, patterns=self.patterns + other.patterns)

    def should_ignore(self, relative_path: PathLike, is_dir: bool) -> bool:
        """Decide whether *relative_path* (relative to ``root``) is excluded.

        Every rule is applied in order and the last matching one wins, so a
        later ``!rule`` can re-include what an earlier rule excluded and
        vice versa.
        """
        full = self.root / relative_path
        ignored = False
        for pattern in self.patterns:
            scoped = pattern.scoped(full)
            if scoped is None:
                continue
            if pattern.matches(scoped, is_dir):
                ignored = not pattern.negated
        return ignored

    def __len__(self) -> int:
        return len(self.patterns)


# Loader
def load_gitignore(directory: Path, root: Optional[Path] = None) -> PatternSet:
    """Read ``<directory>/.gitignore`` into a :class:`PatternSet`.

    A missing file gives an empty set. A file that exists but cannot be
    read or decoded also gives an empty set, with a warning.
    """
    directory = Path(directory)
    root = Path(root) if root is not None else directory
    gitignore_path = directory / GITIGNORE_NAME
    if not gitignore_path.exists():
        return PatternSet.empty(root)

    try:
        text = gitignore_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        warn(f"Could not read .gitignore file at '{gitignore_path}': {e}")
        return PatternSet.empty(root)

    return PatternSet.from_lines(text.splitlines(), defined_in=directory, root=root)
