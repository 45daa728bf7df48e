# src/codecopy/utils/tokenizer.py
import tiktoken

from codecopy.exceptions import TokenizationError
from codecopy.utils.console import ConsoleLogger

log = ConsoleLogger("tokenizer")

ENCODING_NAMES = ("cl100k_base", "p50k_base")

class Tokenizer:
    _encoding = None
    _estimating = False

    @classmethod
    def get_encoding(cls):
        """Loads the first available encoding, or None once all have failed."""
        if cls._encoding is None and not cls._estimating:
            for name in ENCODING_NAMES:
                try:
                    cls._encoding = tiktoken.get_encoding(name)
                    break
                except Exception as e:
                    log.warning(f"Could not load tiktoken encoding '{name}': {e}")
            else:
                log.warning("Falling back to estimated token counts (~4 chars per token).")
                cls._estimating = True
        return cls._encoding

    @staticmethod
    def estimate(text: str) -> int:
        return len(text) // 4

    @staticmethod
    def count(text: str) -> int:
        """Counts tokens for a given text."""
        encoding = Tokenizer.get_encoding()
        if encoding is None:
            return Tokenizer.estimate(text)
        try:
            return len(encoding.encode(text, disallowed_special=()))
        except Exception as e:
            raise TokenizationError(f"failed to encode content: {e}") from e
