"""
Depth-first directory traversal driven by cascading ``.gitignore`` rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional

import pathspec

from .core import display_path, info, is_text_path, warn
from .ignore import PatternSet, load_gitignore

CONFIRM_THRESHOLD = 10

ConfirmHook = Callable[[Path, int], bool]


@dataclass(frozen=True)
class WalkConfig:
    recursive: bool = False
    use_gitignore: bool = False
    verbose: bool = False
    extra_spec: Optional[pathspec.PathSpec] = None


def _is_excluded(rel: Path, is_dir: bool, rules: PatternSet, config: WalkConfig) -> bool:
    if config.use_gitignore and rules.should_ignore(rel, is_dir):
        return True
    if config.extra_spec is not None:
        candidate = rel.as_posix() + ("/" if is_dir else "")
        if config.extra_spec.match_file(candidate):
            return True
    return False


def walk(
    directory: Path,
    base_dir: Path,
    inherited: PatternSet,
    config: WalkConfig,
    confirm: Optional[ConfirmHook] = None,
) -> Iterator[Path]:
    """Yield the files under *directory* that survive the ignore rules.

    Entries are visited in sorted name order so that the output is the same
    on every run. *inherited* is never modified: this level's ``.gitignore``
    is layered onto a new set that is handed down to subdirectories.

    *confirm* is only consulted for the top-level directory, and only when
    more than ``CONFIRM_THRESHOLD`` entries survive filtering.
    """
    directory = Path(directory)
    base_dir = Path(base_dir)
    rel_dir = directory.relative_to(base_dir)
    is_top = not rel_dir.parts

    if config.use_gitignore and not is_top and inherited.should_ignore(rel_dir, True):
        if config.verbose:
            info(f"Ignoring directory (due to parent rules): {directory}")
        return

    rules = inherited
    if config.use_gitignore:
        local = load_gitignore(directory, root=inherited.root)
        if len(local):
            rules = inherited.merge(local)
            if config.verbose:
                info(f"Loaded .gitignore from: {directory / '.gitignore'}")

    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        warn(f"Could not read directory {directory}: {e}")
        return

    kept = []
    for entry in entries:
        if not is_text_path(entry):
            warn(f"Skipping non-UTF8 file path: {display_path(entry)}")
            continue
        is_dir = entry.is_dir()
        rel = entry.relative_to(base_dir)
        if _is_excluded(rel, is_dir, rules, config):
            if config.verbose:
                info(f"Ignoring: {rel.as_posix()}")
            continue
        kept.append((entry, is_dir))

    if is_top and confirm is not None and len(kept) > CONFIRM_THRESHOLD:
        if not confirm(directory, len(kept)):
            return

    for entry, is_dir in kept:
        if is_dir:
            if config.recursive and entry.is_symlink():
                if config.verbose:
                    info(f"Skipping symlinked directory: {entry}")
            elif config.recursive:
                if config.verbose:
                    info(f"Recursively processing directory: {entry}")
                yield from walk(entry, base_dir, rules, config)
            elif config.verbose:
                info(f"Skipping subdirectory (non-recursive mode): {entry}")
        elif entry.is_file():
            yield entry


def iter_files(
    base_dir: Path,
    config: WalkConfig,
    confirm: Optional[ConfirmHook] = None,
) -> Iterator[Path]:
    """Walk *base_dir* as a top-level argument, seeding the default rules."""
    base_dir = Path(base_dir)
    if config.use_gitignore:
        rules = PatternSet.with_defaults(base_dir)
    else:
        rules = PatternSet.empty(base_dir)
    return walk(base_dir, base_dir, rules, config, confirm=confirm)
