# src/codecopy/utils/console.py
"""
Terminal output for codecopy.

Each pipeline stage owns a ConsoleLogger tagged with its name ([scanner],
[budget], ...). Progress goes to stdout; warnings and errors go to stderr so
they survive `codecopy > out.txt`.
"""

import sys
from colorama import Fore, Style, init as colorama_init


class ConsoleLogger:
    """Prints messages tagged with the stage that produced them."""

    COLORS = [
        Fore.BLUE,
        Fore.MAGENTA,
        Fore.CYAN,
        Fore.LIGHTBLUE_EX,
        Fore.LIGHTMAGENTA_EX,
        Fore.LIGHTCYAN_EX,
    ]

    _color_index = 0
    _stage_colors = {}
    _initialized = False

    @classmethod
    def _color_for(cls, stage: str) -> str:
        """Same stage, same tag color for the whole run."""
        if stage not in cls._stage_colors:
            cls._stage_colors[stage] = cls.COLORS[cls._color_index % len(cls.COLORS)]
            cls._color_index += 1
        return cls._stage_colors[stage]

    @classmethod
    def setup(cls):
        """Wrap stdout/stderr for ANSI support. Safe to call repeatedly."""
        if not cls._initialized:
            colorama_init()
            cls._initialized = True

    def __init__(self, stage: str):
        self.stage = stage
        self.color = self._color_for(stage)
        self.prefix = f"{self.color}[{stage}]{Style.RESET_ALL} "

    def log(self, message: str, file=None):
        """Print every line of message behind the stage tag."""
        # Resolved at call time so redirected streams (tests, pipes) are honored
        file = file or sys.stdout
        for line in message.splitlines() or [""]:
            print(f"{self.prefix}{line}", file=file)

    def plain(self, message: str = "", color: str = ""):
        """Print untagged, optionally colored (tables, trees, banners)."""
        if color:
            print(f"{color}{message}{Style.RESET_ALL}")
        else:
            print(message)

    def info(self, message: str):
        self.log(message)

    def warning(self, message: str):
        self.log(f"{Fore.YELLOW}⚠️  Warning:{Style.RESET_ALL} {message}", file=sys.stderr)

    def error(self, message: str):
        self.log(f"{Fore.RED}❌ Error:{Style.RESET_ALL} {message}", file=sys.stderr)

    def success(self, message: str):
        self.log(f"{Fore.GREEN}✓{Style.RESET_ALL} {message}")
