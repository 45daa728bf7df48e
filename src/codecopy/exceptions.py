# src/codecopy/exceptions.py
"""
Errors that end a codecopy run.

Per-file problems (unreadable or untokenizable files) are only warnings and
never raise one of these; everything here reaches main() and exits with 1.
"""

class CodeCopyError(Exception):
    """A fatal error; `details` carries e.g. the offending path."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        return self.message


class TraversalError(CodeCopyError):
    """The project directory could not be listed."""


class TreeGenerationError(CodeCopyError):
    """A directory could not be read while rendering the tree."""


class TokenizationError(CodeCopyError):
    """The tokenizer rejected a file's text."""


class DeliveryError(CodeCopyError):
    """The clipboard failed and code_context.txt could not be written either."""
