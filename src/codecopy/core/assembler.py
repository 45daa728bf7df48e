# src/codecopy/core/assembler.py
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from codecopy.core.tree import generate_project_tree
from codecopy.exceptions import TokenizationError
from codecopy.models import ContextDocument, FileEntry
from codecopy.utils.console import ConsoleLogger
from codecopy.utils.tokenizer import Tokenizer

log = ConsoleLogger("assembler")

BINARY_SNIFF_BYTES = 1024

def read_text_file(path: Path) -> str:
    """
    Reads a file as UTF-8 text.
    Files with a null byte in their first 1024 bytes are rejected as binary.
    """
    data = path.read_bytes()
    if b"\0" in data[:BINARY_SNIFF_BYTES]:
        raise ValueError("looks like a binary file")
    return data.decode("utf-8")

def format_document(root_dir: Path, total_tokens: int, tree_str: str, body: str) -> str:
    return (
        f"Root Directory: {root_dir}\n\n"
        f"Total Tokens: {total_tokens}\n\n"
        f"Tree:\n{tree_str}\n"
        f"Code Context:\n{body}"
    )

def assemble(
    root_dir: Path,
    files: Sequence[FileEntry],
    count_tokens: Optional[Callable[[str], int]] = None,
) -> ContextDocument:
    """
    Reads and tokenizes each file in order and concatenates them under
    their root-relative paths.
    Files that cannot be read or tokenized are reported and left out of
    both the tally and the body, so the header total always matches what
    was concatenated.
    """
    count_tokens = count_tokens or Tokenizer.count
    tally: Dict[str, int] = {}
    included: List[FileEntry] = []
    blocks: List[str] = []

    for entry in files:
        try:
            content = read_text_file(entry.path)
        except (OSError, ValueError) as e:
            log.warning(f"Skipping {entry.rel_path} (read error: {e})")
            continue

        try:
            tokens = count_tokens(content)
        except TokenizationError as e:
            log.warning(f"Skipping {entry.rel_path} (failed to count tokens: {e})")
            continue

        tally[entry.rel_path] = tokens
        included.append(entry)
        blocks.append(f"\n{entry.rel_path}\n\n{content}\n")

    total_tokens = sum(tally.values())
    tree_str = generate_project_tree([e.rel_path for e in included], root_dir.name or str(root_dir))
    text = format_document(root_dir, total_tokens, tree_str, "".join(blocks))

    return ContextDocument(text=text, total_tokens=total_tokens, tally=tally, files=tuple(included))
