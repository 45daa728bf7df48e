# src/codecopy/core/detector.py
import os
from collections import Counter
from pathlib import Path
from typing import Iterable, Iterator

from codecopy.config import DETECTION_EXTENSIONS, UNKNOWN_LANGUAGE
from codecopy.exceptions import TraversalError

def _raise_traversal_error(err: OSError):
    raise TraversalError(f"failed to detect project type: {err}", {"path": err.filename})

def iter_extensions(root_dir: Path) -> Iterator[str]:
    """Extensions of every file beneath root_dir, ignore rules included, in sorted walk order."""
    if not root_dir.is_dir():
        raise TraversalError(f"failed to detect project type: '{root_dir}' is not a directory")
    for root, dirs, files in os.walk(root_dir, onerror=_raise_traversal_error):
        dirs.sort()
        for f in sorted(files):
            yield os.path.splitext(f)[1]

def dominant_language(extensions: Iterable[str]) -> str:
    """
    Tallies recognized extensions per language and returns the winner.
    On equal counts the language that reached the maximum first keeps it.
    """
    counts: Counter = Counter()
    best_tag, best_count = UNKNOWN_LANGUAGE, 0
    for extension in extensions:
        tag = DETECTION_EXTENSIONS.get(extension)
        if tag is None:
            continue
        counts[tag] += 1
        if counts[tag] > best_count:
            best_tag, best_count = tag, counts[tag]
    return best_tag

def detect_project_type(root_dir: Path) -> str:
    """Detects the project language from the extensions of all files under root_dir."""
    return dominant_language(iter_extensions(root_dir))
