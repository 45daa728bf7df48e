# src/codecopy/core/presenter.py
from pathlib import Path
from typing import Sequence

from colorama import Fore, Style

from codecopy.core.tree import generate_project_tree
from codecopy.models import ContextDocument
from codecopy.utils.console import ConsoleLogger

out = ConsoleLogger("codecopy")

MAX_EXCLUDED_SHOWN = 10

def show_project_type(language_tag: str):
    out.plain(f"🚀 Detected project type: {language_tag}", Fore.GREEN + Style.BRIGHT)

def show_selected_files(document: ContextDocument):
    ranked = sorted(document.tally.items(), key=lambda item: item[1], reverse=True)

    out.plain("\n📂 Selected files, largest first (tokens)", Fore.BLUE)
    out.plain(f"{'Rank':<5} | {'Tokens':<10} | {'File Path'}")
    out.plain("-" * 60)
    for i, (rel_path, tokens) in enumerate(ranked):
        out.plain(f"{i+1:<5} | {tokens:<10} | {rel_path}")
    out.plain("-" * 60)
    out.plain(f"Total files: {len(ranked)}")

def show_excluded_files(excluded: Sequence[str]):
    if not excluded:
        return
    shown = ", ".join(excluded[:MAX_EXCLUDED_SHOWN])
    more = len(excluded) - MAX_EXCLUDED_SHOWN
    if more > 0:
        shown += f" (+{more} more)"
    out.plain(f"\n🚫 Excluded files: {shown}", Fore.YELLOW)

def show_tree(root_dir: Path, document: ContextDocument):
    out.plain("\n🌳 Project Directory Tree | Token Count", Fore.CYAN)
    out.plain("-" * 40 + " | " + "-" * 12, Fore.CYAN)
    tree_str = generate_project_tree(
        [e.rel_path for e in document.files],
        root_dir.name or str(root_dir),
        token_counts=document.tally,
    )
    out.plain(tree_str.rstrip("\n"))

def show_total(document: ContextDocument):
    out.plain(f"\n📊 Total Tokens: {document.total_tokens}", Fore.CYAN)

def show_summary(root_dir: Path, document: ContextDocument, excluded: Sequence[str]):
    """Everything the user sees about the selection before delivery."""
    show_selected_files(document)
    show_excluded_files(excluded)
    show_tree(root_dir, document)
    show_total(document)
