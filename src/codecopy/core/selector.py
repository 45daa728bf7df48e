# src/codecopy/core/selector.py
from typing import Callable, List, Optional, Sequence

from codecopy.config import LANGUAGE_EXTENSIONS
from codecopy.core.scanner import ProjectScanner
from codecopy.core.tree import extract_files_from_tree, render_tree
from codecopy.models import FileEntry, RunOptions
from codecopy.utils.console import ConsoleLogger
from codecopy.utils.prompt import prompt_multi_select

log = ConsoleLogger("selector")

MultiSelect = Callable[[str, Sequence[str]], List[str]]

def relevant_extensions(language_tag: str, forced_language: Optional[str] = None) -> frozenset:
    """A forced language wins over the detected one. Unknown languages match nothing."""
    return LANGUAGE_EXTENSIONS.get(forced_language or language_tag, frozenset())

def select_relevant_files(scanner: ProjectScanner, extensions: frozenset) -> List[FileEntry]:
    return [entry for entry in scanner.walk() if entry.extension in extensions]

def select_manually(scanner: ProjectScanner, prompt: Optional[MultiSelect] = None) -> List[FileEntry]:
    """Offers every non-ignored file and keeps the picks in the order they were made."""
    prompt = prompt or prompt_multi_select
    candidates = {entry.rel_path: entry for entry in scanner.walk()}
    picked = prompt("Select files to include", list(candidates))
    return [candidates[rel_path] for rel_path in picked]

def select_from_tree(scanner: ProjectScanner) -> List[FileEntry]:
    tree_output = render_tree(scanner.root_dir, scanner.ignore_spec)
    return [
        FileEntry.from_path(scanner.root_dir / rel_path, scanner.root_dir)
        for rel_path in extract_files_from_tree(tree_output)
    ]

def select_files(
    scanner: ProjectScanner,
    language_tag: str,
    options: RunOptions,
    prompt: Optional[MultiSelect] = None,
) -> List[FileEntry]:
    """
    Produces the ordered list of files to include.
    Manual mode asks the user; otherwise files are matched against the
    language's extension set. An empty result falls back to every file
    listed in the rendered directory tree.
    """
    if options.manual:
        selected = select_manually(scanner, prompt)
    else:
        extensions = relevant_extensions(language_tag, options.language)
        selected = select_relevant_files(scanner, extensions)

    if not selected:
        log.info("No relevant files selected, falling back to the directory tree.")
        selected = select_from_tree(scanner)
    return selected
