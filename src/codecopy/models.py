# src/codecopy/models.py
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple

from codecopy.config import TOKEN_LIMIT

@dataclass(frozen=True)
class FileEntry:
    """A file found under the project root."""
    path: Path
    rel_path: str
    extension: str

    @classmethod
    def from_path(cls, path: Path, root_dir: Path) -> "FileEntry":
        return cls(
            path=path,
            rel_path=path.relative_to(root_dir).as_posix(),
            extension=path.suffix,
        )

@dataclass(frozen=True)
class ContextDocument:
    """The assembled text plus the tally it was built from."""
    text: str
    total_tokens: int
    tally: Dict[str, int] = field(default_factory=dict)
    files: Tuple[FileEntry, ...] = ()

@dataclass
class RunOptions:
    """Parsed command line options passed through the pipeline."""
    manual: bool = False
    language: Optional[str] = None
    token_limit: int = TOKEN_LIMIT
    auto_trim: bool = False

class DeliveryOutcome(Enum):
    CLIPBOARD = "clipboard"
    FALLBACK_FILE = "fallback_file"
