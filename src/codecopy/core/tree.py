# src/codecopy/core/tree.py
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import pathspec

from codecopy.core.ignore import is_path_ignored
from codecopy.exceptions import TreeGenerationError

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "

def _build_tree_dict(file_paths: List[str]) -> Dict:
    tree_dict: Dict = {}
    for path in sorted(file_paths):
        current_level = tree_dict
        for part in Path(path).parts:
            current_level = current_level.setdefault(part, {})
    return tree_dict

def generate_project_tree(
    file_paths: List[str],
    root_name: str,
    token_counts: Optional[Mapping[str, int]] = None,
    width: int = 40,
) -> str:
    """
    Generates a string representation of the project tree for the given files.
    With token_counts, each file line is annotated as 'name | tokens' and a
    'N directories, M files | total' summary line is appended.
    """
    tree_dict = _build_tree_dict(file_paths)
    lines = [f"{root_name}/"]
    dir_count = 0

    def _generate_lines_recursive(subtree: Dict, prefix: str, parent: str):
        nonlocal dir_count
        entries = sorted(subtree.items())
        for i, (name, content) in enumerate(entries):
            is_last = (i == len(entries) - 1)
            line = f"{prefix}{LAST_BRANCH if is_last else BRANCH}{name}"
            rel_path = f"{parent}{name}"

            if content:
                dir_count += 1
                lines.append(line + "/")
                _generate_lines_recursive(content, prefix + (SPACE if is_last else PIPE), rel_path + "/")
            elif token_counts is not None:
                lines.append(f"{line:<{width}} | {token_counts.get(rel_path, 0)}")
            else:
                lines.append(line)

    _generate_lines_recursive(tree_dict, "", "")

    if token_counts is not None:
        total = sum(token_counts.get(p, 0) for p in file_paths)
        summary = f"{dir_count} directories, {len(file_paths)} files"
        lines.append("")
        lines.append(f"{summary:<{width}} | {total}")
    return "\n".join(lines) + "\n"

def render_tree(root_dir: Path, ignore_spec: pathspec.PathSpec) -> str:
    """
    Renders the whole directory under root_dir, 'tree -F' style:
    directories carry a trailing '/', ignored entries are left out.
    """
    lines = ["./"]

    def _render(dir_path: Path, prefix: str):
        visible = []
        try:
            with os.scandir(dir_path) as it:
                entries = sorted(it, key=lambda e: e.name)
            for entry in entries:
                is_dir = entry.is_dir()
                # Symlinked directories are listed but not entered, like os.walk
                descend = is_dir and not entry.is_symlink()
                rel_path = Path(entry.path).relative_to(root_dir)
                if not is_path_ignored(rel_path, ignore_spec, is_directory=is_dir):
                    visible.append((entry, is_dir, descend))
        except OSError as e:
            raise TreeGenerationError(f"failed to generate tree: {e}", {"path": str(dir_path)}) from e

        for i, (entry, is_dir, descend) in enumerate(visible):
            is_last = (i == len(visible) - 1)
            connector = LAST_BRANCH if is_last else BRANCH
            lines.append(f"{prefix}{connector}{entry.name}{'/' if is_dir else ''}")
            if descend:
                _render(Path(entry.path), prefix + (SPACE if is_last else PIPE))

    _render(root_dir, "")
    return "\n".join(lines) + "\n"

def extract_files_from_tree(tree_output: str) -> List[str]:
    """
    Parses the leaf-file lines of a rendered tree back into root-relative paths.
    Depth is recovered from the 4-character indentation units.
    """
    files = []
    stack: List[str] = []
    for line in tree_output.splitlines():
        for connector in (BRANCH, LAST_BRANCH):
            idx = line.find(connector)
            if idx != -1:
                break
        else:
            continue

        depth = idx // len(BRANCH)
        name = line[idx + len(connector):].strip()
        del stack[depth:]
        if name.endswith("/"):
            stack.append(name.rstrip("/"))
        else:
            files.append("/".join(stack + [name]))
    return files
