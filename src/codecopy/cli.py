# src/codecopy/cli.py
import sys
import argparse
from pathlib import Path

from colorama import Fore, Style

from codecopy.config import FALLBACK_FILENAME, ISSUES_URL, LANGUAGE_FLAGS, TOKEN_LIMIT
from codecopy.core.assembler import assemble
from codecopy.core.budget import ask_user, enforce_budget, largest_first
from codecopy.core.detector import detect_project_type
from codecopy.core.ignore import load_ignore_spec
from codecopy.core.presenter import show_project_type, show_summary
from codecopy.core.scanner import ProjectScanner
from codecopy.core.selector import select_files
from codecopy.core.sink import deliver
from codecopy.exceptions import CodeCopyError
from codecopy.models import DeliveryOutcome, RunOptions
from codecopy.utils.console import ConsoleLogger

log = ConsoleLogger("codecopy")

class CodeCopyArgumentParser(argparse.ArgumentParser):
    """Reports bad arguments like any other fatal error: one line, exit code 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        show_error(message)
        sys.exit(1)

def create_arg_parser():
    parser = CodeCopyArgumentParser(
        prog="codecopy",
        description="Copy an LLM-ready code context of the current directory to the clipboard.",
        allow_abbrev=False,
    )
    parser.add_argument("-m", dest="manual", action="store_true", help="Enable manual file selection mode")

    languages = parser.add_mutually_exclusive_group()
    for flag, tag in LANGUAGE_FLAGS.items():
        languages.add_argument(
            flag, dest="language", action="store_const", const=tag,
            help=f"Generate code context for {tag} projects",
        )

    parser.add_argument(
        "--limit", type=int, default=TOKEN_LIMIT,
        help=f"Token budget before offering to drop files (default: {TOKEN_LIMIT})",
    )
    parser.add_argument(
        "--auto-trim", action="store_true",
        help="Drop the largest files automatically instead of asking when over budget",
    )
    return parser

def parse_options(argv=None) -> RunOptions:
    args = create_arg_parser().parse_args(argv)
    return RunOptions(
        manual=args.manual,
        language=args.language,
        token_limit=args.limit,
        auto_trim=args.auto_trim,
    )

def get_root_dir() -> Path:
    try:
        return Path.cwd().resolve()
    except OSError as e:
        raise CodeCopyError(f"failed to get current directory: {e}") from e

def run(options: RunOptions, root_dir: Path) -> DeliveryOutcome:
    """Runs the whole pipeline for root_dir and reports how the context was delivered."""
    ignore_spec = load_ignore_spec(root_dir)
    scanner = ProjectScanner(root_dir, ignore_spec)

    # 1. Detection & selection
    language_tag = detect_project_type(root_dir)
    show_project_type(language_tag)
    if options.language:
        log.info(f"Using {options.language} file types (forced).")

    files = select_files(scanner, language_tag, options)

    # 2. Assembly & budget
    document = assemble(root_dir, files)
    chooser = largest_first(options.token_limit) if options.auto_trim else ask_user()
    files, document = enforce_budget(root_dir, files, document, options.token_limit, chooser, assemble)

    # 3. Review
    show_summary(root_dir, document, scanner.excluded())

    # 4. Delivery
    outcome = deliver(document.text)
    if outcome is DeliveryOutcome.CLIPBOARD:
        log.success("Code context copied to clipboard!")
    else:
        log.success(f"Code context generated and written to {FALLBACK_FILENAME}")
    return outcome

def show_error(message: str):
    print(f"{Fore.RED}{Style.BRIGHT}❌ Error: {message}{Style.RESET_ALL}", file=sys.stderr)
    print(f"{Fore.YELLOW}If the issue persists, please file an issue at {ISSUES_URL}{Style.RESET_ALL}", file=sys.stderr)

def main(argv=None):
    ConsoleLogger.setup()
    options = parse_options(argv)

    try:
        run(options, get_root_dir())
        print(f"\n{Fore.YELLOW}💡 For more options and functionality, run: {Fore.GREEN}codecopy --help{Style.RESET_ALL}")

    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)

    except CodeCopyError as e:
        show_error(str(e))
        sys.exit(1)

    except Exception as e:
        show_error(f"An unexpected error occurred: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
