"""
Core helpers for toprompt: console output, file formatting and the clipboard.
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pathspec
import pyperclip
from colorama import Fore, Style, init as colorama_init

colorama_init()

# Exceptions
class ToPromptError(Exception): ...
class InvalidPathError(ToPromptError): ...
class ConfigFileError(ToPromptError): ...
class FileReadError(ToPromptError): ...
class ClipboardError(ToPromptError): ...


PREFIX = "[toprompt]"


# Console output
def _emit(msg: str, color: Optional[str] = None, err: bool = False) -> None:
    stream = sys.stderr if err else sys.stdout
    if color:
        msg = color + msg + Style.RESET_ALL
    print(msg, file=stream)


def info(msg: str) -> None:
    _emit(f"{PREFIX} {msg}", Fore.CYAN)


def warn(msg: str) -> None:
    _emit(f"{PREFIX} ! {msg}", Fore.YELLOW, err=True)


def success(msg: str) -> None:
    _emit(msg, Fore.GREEN)


def error(msg: str) -> None:
    _emit(f"Error: {msg}", Fore.RED, err=True)


# Language labels
_LANG_MAP: Dict[str, str] = {
    ".rs": "rust",
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".jsx": "jsx",
    ".tsx": "tsx",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".hh": "cpp",
    ".cs": "csharp",
    ".go": "go",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".r": "r",
    ".m": "matlab",
    ".mm": "objectivec",
    ".sql": "sql",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "bash",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
    ".xml": "xml",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "scss",
    ".less": "less",
    ".md": "markdown",
    ".markdown": "markdown",
    ".tex": "latex",
    ".vim": "vim",
    ".vimrc": "vim",
    ".lua": "lua",
    ".dart": "dart",
    ".scala": "scala",
    ".jl": "julia",
    ".hs": "haskell",
    ".clj": "clojure",
    ".cljs": "clojure",
    ".cljc": "clojure",
    ".edn": "clojure",
    ".ex": "elixir",
    ".exs": "elixir",
    ".erl": "erlang",
    ".hrl": "erlang",
    ".ml": "ocaml",
    ".mli": "ocaml",
    ".fs": "fsharp",
    ".fsi": "fsharp",
    ".fsx": "fsharp",
    ".fsscript": "fsharp",
    ".pl": "perl",
    ".pm": "perl",
    ".ps1": "powershell",
    ".psm1": "powershell",
    ".psd1": "powershell",
    ".toml": "toml",
    ".ini": "ini",
    ".cfg": "ini",
    ".conf": "ini",
    ".dockerfile": "dockerfile",
    ".makefile": "makefile",
    ".mk": "makefile",
    ".mak": "makefile",
    ".gradle": "groovy",
    ".tf": "terraform",
    ".tfvars": "terraform",
    ".hcl": "hcl",
    ".http": "http",
    ".gd": "gdscript",
}


def lang_from_ext(path: Path) -> str:
    return _LANG_MAP.get(path.suffix.lower(), "")


# Extra ignore patterns (--config)
def load_extra_patterns(config_path: Path) -> "pathspec.PathSpec":
    if not config_path.exists():
        raise ConfigFileError(f"Config file '{config_path}' does not exist")
    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            lines = [
                ln.strip()
                for ln in fh
                if ln.strip() and not ln.lstrip().startswith("#")
            ]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read config file '{config_path}': {e}")
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


# Path text
def is_text_path(path: Path) -> bool:
    """Whether *path* can be written out as UTF-8 (no undecodable name bytes)."""
    try:
        str(path).encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def display_path(path: Path) -> str:
    return str(path).encode("utf-8", "surrogateescape").decode("utf-8", "replace")


# Collector
def _is_binary(data: bytes) -> bool:
    return b"\0" in data


def format_file(path: Path) -> str:
    """Render *path* as a ``# <path>`` header followed by a fenced code block."""
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise FileReadError(f"Could not read '{path}': {e}")
    if _is_binary(raw):
        raise FileReadError(f"'{path}' looks like a binary file")

    text = raw.decode("utf-8", errors="replace")
    lang = lang_from_ext(path)
    return f"# {path}\n```{lang}\n{text.rstrip()}\n```"


def select_files(
    paths: Iterable[Path], regex: Optional["re.Pattern[str]"] = None
) -> Iterable[Path]:
    """Keep only paths whose POSIX form matches *regex* (all of them if ``None``)."""
    for p in paths:
        if regex is None or regex.search(p.as_posix()):
            yield p


def collect(paths: Iterable[Path]) -> Tuple[str, int]:
    """Format every path, skipping (and reporting) the ones that fail.

    Returns the blocks joined by a blank line and the number of files that
    made it in.
    """
    blocks: List[str] = []
    for p in paths:
        if not is_text_path(p):
            warn(f"Skipping non-UTF8 file path: {display_path(p)}")
            continue
        try:
            blocks.append(format_file(p))
        except FileReadError as e:
            warn(f"Error processing file: {e}")
    return "\n\n".join(blocks), len(blocks)


# Clipboard
def copy_to_clipboard(text: str) -> None:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(str(e) or "No clipboard mechanism available")
    except UnicodeError as e:
        raise ClipboardError(f"Text could not be encoded for the clipboard: {e}")
