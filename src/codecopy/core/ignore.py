# src/codecopy/core/ignore.py
from pathlib import Path, PurePath
from typing import Iterable, List, Optional, Union

import pathspec

from codecopy.config import FALLBACK_FILENAME, IGNORE_FILENAME, IGNORED_DIRS
from codecopy.utils.console import ConsoleLogger

log = ConsoleLogger("ignore")

def default_ignore_patterns() -> List[str]:
    """Directory patterns for the built-in ignore list, plus this tool's own output."""
    patterns = [f"{name}/" for name in IGNORED_DIRS]
    patterns.append(f"/{FALLBACK_FILENAME}")
    return patterns

def read_ignore_file(ignore_file: Path) -> List[str]:
    """Returns the raw lines of an ignore file, or [] if there is none."""
    if not ignore_file.is_file():
        return []
    try:
        with open(ignore_file, "r", encoding="utf-8") as f:
            return f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        log.warning(f"Could not read {ignore_file.name}: {e}")
        return []

def load_ignore_spec(root_dir: Path, extra_patterns: Optional[Iterable[str]] = None) -> pathspec.PathSpec:
    """
    Builds the PathSpec used for traversal.
    Built-in directory rules come first, then .codecopyignore, then any extras,
    so later rules (including '!' negations) win.
    """
    lines = default_ignore_patterns()
    lines.extend(read_ignore_file(root_dir / IGNORE_FILENAME))
    if extra_patterns:
        lines.extend(extra_patterns)

    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except Exception as e:
        log.warning(f"Error parsing {IGNORE_FILENAME}, using built-in rules only: {e}")
        return pathspec.PathSpec.from_lines("gitwildmatch", default_ignore_patterns())

def is_path_ignored(rel_path: Union[str, PurePath], spec: pathspec.PathSpec, is_directory: bool = False) -> bool:
    """Checks a root-relative path against the spec. Directories are matched with a trailing slash."""
    path_str = PurePath(rel_path).as_posix()
    if is_directory and not path_str.endswith("/"):
        path_str += "/"
    return spec.match_file(path_str)
