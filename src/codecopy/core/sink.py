# src/codecopy/core/sink.py
import sys
from pathlib import Path
from typing import Optional

import pyperclip

from codecopy.config import FALLBACK_FILENAME
from codecopy.exceptions import DeliveryError
from codecopy.models import DeliveryOutcome
from codecopy.utils.console import ConsoleLogger

log = ConsoleLogger("sink")

SUPPORTED_PLATFORMS = ("darwin", "linux", "win32")

class ClipboardUnavailable(Exception):
    pass

def copy_to_clipboard(text: str, platform: Optional[str] = None):
    """Copies text to the OS clipboard. Raises ClipboardUnavailable on any failure."""
    platform = platform or sys.platform
    if platform not in SUPPORTED_PLATFORMS:
        raise ClipboardUnavailable(f"unsupported platform '{platform}'")
    try:
        pyperclip.copy(text)
    except (pyperclip.PyperclipException, OSError) as e:
        raise ClipboardUnavailable(str(e)) from e

def write_fallback(text: str, fallback_path: Path):
    try:
        with open(fallback_path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise DeliveryError(f"failed to write code context to {fallback_path.name}: {e}") from e

def deliver(text: str, fallback_path: Optional[Path] = None, platform: Optional[str] = None) -> DeliveryOutcome:
    """
    Puts the document on the clipboard, or writes it verbatim to
    code_context.txt in the current directory when that fails.
    """
    try:
        copy_to_clipboard(text, platform)
        return DeliveryOutcome.CLIPBOARD
    except ClipboardUnavailable as e:
        log.error(f"failed to copy code context to clipboard: {e}")

    fallback_path = fallback_path or Path.cwd() / FALLBACK_FILENAME
    write_fallback(text, fallback_path)
    return DeliveryOutcome.FALLBACK_FILE
