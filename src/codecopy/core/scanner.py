# src/codecopy/core/scanner.py
import os
from pathlib import Path
from typing import Iterator, List

import pathspec

from codecopy.core.ignore import is_path_ignored
from codecopy.exceptions import TraversalError
from codecopy.models import FileEntry
from codecopy.utils.console import ConsoleLogger

log = ConsoleLogger("scanner")

def _raise_traversal_error(err: OSError):
    raise TraversalError(f"failed to walk the directory: {err}", {"path": err.filename})

class ProjectScanner:
    def __init__(self, root_dir: Path, ignore_spec: pathspec.PathSpec):
        self.root_dir = root_dir
        self.ignore_spec = ignore_spec

    def walk(self) -> Iterator[FileEntry]:
        """
        Walks the directory tree in sorted order, pruning ignored directories,
        and yields a FileEntry for every remaining file.
        Any OSError during the walk is fatal.
        """
        if not self.root_dir.is_dir():
            raise TraversalError(f"failed to walk the directory: '{self.root_dir}' is not a directory")

        for root, dirs, files in os.walk(self.root_dir, onerror=_raise_traversal_error):
            root_path = Path(root)

            # Pruning dirs in place stops os.walk from descending into them
            for d in list(dirs):
                dir_rel_path = (root_path / d).relative_to(self.root_dir)
                if is_path_ignored(dir_rel_path, self.ignore_spec, is_directory=True):
                    dirs.remove(d)
            dirs.sort()

            for f in sorted(files):
                file_abs_path = root_path / f
                entry = FileEntry.from_path(file_abs_path, self.root_dir)
                if is_path_ignored(entry.rel_path, self.ignore_spec):
                    continue
                yield entry

    def excluded(self) -> List[str]:
        """Root-relative paths of files hidden by the ignore rules. Read errors only warn."""
        excluded_files = []

        def _warn(err: OSError):
            log.warning(f"failed to list excluded files under {err.filename}: {err}")

        for root, dirs, files in os.walk(self.root_dir, onerror=_warn):
            root_path = Path(root)
            dirs.sort()
            rel_root = root_path.relative_to(self.root_dir)
            root_ignored = rel_root != Path(".") and is_path_ignored(rel_root, self.ignore_spec, is_directory=True)
            for f in sorted(files):
                rel_path = (rel_root / f).as_posix()
                if root_ignored or is_path_ignored(rel_path, self.ignore_spec):
                    excluded_files.append(rel_path)
        return excluded_files
