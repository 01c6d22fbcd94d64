"""
CLI entrypoint for toprompt.
"""
import argparse
import re
import sys
from pathlib import Path
from typing import List, Optional

from .core import (
    load_extra_patterns,
    select_files,
    collect,
    copy_to_clipboard,
    error,
    info,
    success,
    InvalidPathError,
    ConfigFileError,
    ClipboardError,
)
from .walker import WalkConfig, iter_files

PREVIEW_CHARS = 500

_EXAMPLES = """\
examples:
  toprompt *.py        copy specific files (shell expanded)
  toprompt .           copy all files in a folder (non-recursive)
  toprompt -r .        copy a folder and its subfolders
  toprompt -i .        skip files excluded by .gitignore
  toprompt -ri .       use .gitignore and recurse through subfolders
"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = _ArgumentParser(
        prog="toprompt",
        description="Copy source files to the clipboard as fenced markdown code blocks.",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("paths", nargs="*", type=Path, metavar="PATH", help="Files or directories")
    p.add_argument("-r", "--recursive", action="store_true", help="Process directories recursively")
    p.add_argument(
        "-i",
        "--gitignore",
        action="store_true",
        help="Use .gitignore files to exclude files/directories",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose output (show ignored files)")
    p.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Process large directories without asking for confirmation",
    )
    p.add_argument("--match", metavar="REGEX", help="Only copy files whose path matches REGEX")
    p.add_argument(
        "--config",
        type=Path,
        help="Path to a file with extra ignore patterns (one per line)",
    )
    ns = p.parse_args(argv)

    if not ns.paths:
        p.error("at least one file or directory is required")
    if any(str(path) == "-" for path in ns.paths):
        p.error("reading from stdin via '-' is not supported")
    if ns.match is not None:
        try:
            ns.match = re.compile(ns.match)
        except re.error as e:
            p.error(f"invalid --match expression: {e}")
    return ns


def confirm_large_directory(directory: Path, count: int) -> bool:
    print(f"\nWarning: Directory '{directory}' contains {count} items.")
    try:
        answer = input("Do you want to process all files in this directory? (y/n): ")
    except EOFError:
        answer = ""
    if answer.strip().lower().startswith("y"):
        return True
    print(f"Skipping directory '{directory}'")
    return False


def _check_paths(paths: List[Path]) -> None:
    for path in paths:
        if not path.exists():
            raise InvalidPathError(f"Path '{path}' does not exist or is not accessible.")
        if not (path.is_file() or path.is_dir()):
            raise InvalidPathError(f"'{path}' is neither a file nor a directory")


def _gather(paths: List[Path], config: WalkConfig, yes: bool):
    confirm = None if yes else confirm_large_directory
    for path in paths:
        if path.is_dir():
            yield from iter_files(path, config, confirm=confirm)
        else:
            yield path


def main(argv: Optional[List[str]] = None) -> None:
    try:
        ns = _parse_args(argv)

        extra_spec = None
        if ns.config:
            try:
                extra_spec = load_extra_patterns(ns.config.resolve())
                if ns.verbose:
                    info(f"Loaded extra patterns from {ns.config}")
            except ConfigFileError as e:
                error(str(e))
                sys.exit(1)

        try:
            _check_paths(ns.paths)
        except InvalidPathError as e:
            error(str(e))
            sys.exit(1)

        config = WalkConfig(
            recursive=ns.recursive,
            use_gitignore=ns.gitignore,
            verbose=ns.verbose,
            extra_spec=extra_spec,
        )
        files = select_files(_gather(ns.paths, config, ns.yes), ns.match)
        text, count = collect(files)

        if count == 0:
            error("No files were successfully processed.")
            sys.exit(1)

        try:
            copy_to_clipboard(text)
        except ClipboardError as e:
            error(f"Failed to copy to clipboard: {e}")
            print("\n--- Output (not copied) ---\n")
            print(text)
            return

        success(f"\nSuccessfully copied {count} file(s) to clipboard!")
        if config.use_gitignore:
            print("(.gitignore rules were applied)")
        if config.recursive:
            print("(Processed directories recursively)")
        elif any(p.is_dir() for p in ns.paths):
            print("(Processed directories non-recursively)")
        print("\n--- Clipboard Contents Preview (first 500 chars) ---\n")
        print(f"{text[:PREVIEW_CHARS]}...")

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
