# src/codecopy/utils/prompt.py
from typing import List, Sequence

from colorama import Fore, Style

from codecopy.utils.console import ConsoleLogger

log = ConsoleLogger("select")

NEXT_LABEL = "Select another file or press Enter to continue"

def _show_choices(items: Sequence[str]):
    for i, item in enumerate(items, start=1):
        print(f"  {Fore.CYAN}{i:>3}{Style.RESET_ALL}  {item}")

def prompt_multi_select(label: str, items: Sequence[str]) -> List[str]:
    """
    Repeatedly asks for one item by number, removing each pick from the
    candidates, until the user enters nothing or the list runs out.
    Ctrl-C or end of input stops early and returns what was picked so far.
    """
    remaining = list(items)
    selected: List[str] = []
    current_label = label

    while remaining:
        print(f"\n{Style.BRIGHT}{current_label}{Style.RESET_ALL}")
        _show_choices(remaining)
        try:
            answer = input("> ").strip()
        except (KeyboardInterrupt, EOFError):
            print()
            break

        if not answer:
            break
        if not answer.isdigit() or not 1 <= int(answer) <= len(remaining):
            log.warning(f"'{answer}' is not a number between 1 and {len(remaining)}.")
            continue

        pick = remaining.pop(int(answer) - 1)
        selected.append(pick)
        print(f"{Fore.GREEN}✅ {pick}{Style.RESET_ALL}")
        current_label = NEXT_LABEL

    return selected
