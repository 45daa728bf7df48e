# src/codecopy/core/budget.py
from enum import Enum
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

from codecopy.models import ContextDocument, FileEntry
from codecopy.utils.console import ConsoleLogger
from codecopy.utils.prompt import prompt_multi_select

log = ConsoleLogger("budget")

# (selection, assembled document) -> rel_paths to drop
RemovalChooser = Callable[[Sequence[FileEntry], ContextDocument], List[str]]
Reassemble = Callable[[Path, Sequence[FileEntry]], ContextDocument]

class BudgetState(Enum):
    WITHIN_BUDGET = "within_budget"
    OVER_BUDGET = "over_budget"

def budget_state(total_tokens: int, limit: int) -> BudgetState:
    return BudgetState.OVER_BUDGET if total_tokens > limit else BudgetState.WITHIN_BUDGET

def largest_first(limit: int) -> RemovalChooser:
    """
    Builds a chooser that drops the largest files until the rest fits in limit.
    Equal counts drop the file that comes later in the selection first.
    """
    def _choose(files: Sequence[FileEntry], document: ContextDocument) -> List[str]:
        order = {entry.rel_path: i for i, entry in enumerate(files)}
        ranked = sorted(document.tally.items(), key=lambda item: (-item[1], -order.get(item[0], 0)))
        remaining = document.total_tokens
        removed = []
        for rel_path, tokens in ranked:
            if remaining <= limit:
                break
            removed.append(rel_path)
            remaining -= tokens
        return removed
    return _choose

def ask_user(prompt=None) -> RemovalChooser:
    """Builds a chooser that lets the user pick files to drop."""
    def _choose(files: Sequence[FileEntry], document: ContextDocument) -> List[str]:
        return (prompt or prompt_multi_select)("Select files to remove", [e.rel_path for e in files])
    return _choose

def enforce_budget(
    root_dir: Path,
    files: Sequence[FileEntry],
    document: ContextDocument,
    limit: int,
    choose_removals: RemovalChooser,
    reassemble: Reassemble,
) -> Tuple[List[FileEntry], ContextDocument]:
    """
    Offers a single remediation round when the document is over budget.
    The reassembled document is returned as-is, even if it is still too large.
    """
    if budget_state(document.total_tokens, limit) is BudgetState.WITHIN_BUDGET:
        return list(files), document

    log.warning(f"The total token count ({document.total_tokens}) exceeds the limit of {limit} tokens.")
    log.warning("Consider reducing the number of files or their contents.")

    removed = set(choose_removals(files, document))
    remaining = [entry for entry in files if entry.rel_path not in removed]
    if removed:
        log.info(f"Removed {len(removed)} file(s) from the selection.")

    document = reassemble(root_dir, remaining)
    if budget_state(document.total_tokens, limit) is BudgetState.OVER_BUDGET:
        log.warning(f"Still over budget ({document.total_tokens} tokens), using the context as-is.")
    return remaining, document
