# cli.py
"""
Command-line shell around the expression pipeline.

Input comes from, in order of preference: the EXPRESSION argument, a file
given with --file (one expression per line), piped standard input, or an
interactive prompt. Results go to stdout (or --output), errors to stderr.

Exit status: 0 when every expression evaluated, 1 when any failed, 2 for
usage errors, unreadable files or invalid settings.
"""

import argparse
import logging
import sys
from typing import Iterable, List, Optional, TextIO, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from pydantic import ValidationError

from expresser import run
from settings import Settings, load_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

HELP_TEXT = """
Expression evaluator
--------------------
Operators (lowest to highest precedence):
  - Comparison:      1 < 2, 3 > 4, 2 = 2   (1 if true, 0 if false)
  - Add / subtract:  1 + 2, 3 - 4
  - Multiply/divide: 5 * 6, 7 / 8
  - Negation:        -5, --5
  - Parentheses:     (1 + 2) * 3

Commands:
  :help        show this message
  :quit/:exit  leave (Ctrl-D also works)
"""


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expresser",
        description="Evaluate arithmetic expressions.",
    )
    parser.add_argument(
        "expression",
        nargs="?",
        help="Expression to evaluate. Omit to read --file, piped stdin, or start a prompt.",
    )
    parser.add_argument(
        "-f", "--file",
        type=str,
        help="Path to a file with one expression per line.",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Write results to this file instead of standard output.",
    )
    parser.add_argument(
        "-i", "--interactive",
        action="store_true",
        help="Start the interactive prompt even when stdin is not a terminal.",
    )
    parser.add_argument(
        "--precision",
        type=int,
        help="Round printed results to this many decimal places (overrides EXPRESSER_PRECISION).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (overrides EXPRESSER_LOG_LEVEL).",
    )
    return parser


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.logging_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(settings.logging_level)


def evaluate_lines(lines: Iterable[str], precision: Optional[int] = None) -> Tuple[List[str], bool]:
    """
    Evaluate each non-blank line as an independent expression.
    Returns one output line per expression and whether all of them succeeded.
    """
    results = []
    all_ok = True
    for line in lines:
        if not line.strip():
            continue
        outcome = run(line)
        all_ok = all_ok and outcome.ok
        results.append(outcome.render(precision))
    return results, all_ok


class REPL:
    """Read-Eval-Print Loop; each line is an isolated pipeline run."""
    PROMPT = '> '

    def __init__(self, settings: Settings, session=None, out: TextIO = None):
        self.settings = settings
        self.out = out or sys.stdout
        self.session = session or PromptSession(history=FileHistory(settings.history_file))

    def handle_line(self, line: str) -> Optional[str]:
        """
        Process one input line and return the text to print, if any.
        Raises EOFError for :quit and :exit.
        """
        s = line.strip()
        if not s:
            return None
        if s.startswith(':'):
            cmd = s[1:].strip().lower()
            if cmd in ('quit', 'exit'):
                raise EOFError()
            if cmd == 'help':
                return HELP_TEXT.strip()
            return f"Unknown command: {s}. Use :help for available commands."
        return run(s).render(self.settings.precision)

    def loop(self) -> int:
        print("Type :help for help, :quit or Ctrl-D to leave.", file=self.out)
        while True:
            try:
                line = self.session.prompt(self.PROMPT)
                output = self.handle_line(line)
            except KeyboardInterrupt:
                continue
            except EOFError:
                break
            if output is not None:
                print(output, file=self.out)
        return EXIT_OK


def _write_results(results: List[str], output: Optional[str]) -> None:
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write("".join(f"{r}\n" for r in results))
    else:
        for r in results:
            print(r)


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    stdin = stdin or sys.stdin

    try:
        settings = load_settings()
        overrides = {}
        if args.precision is not None:
            overrides['precision'] = args.precision
        if args.log_level is not None:
            overrides['log_level'] = args.log_level
        if overrides:
            settings = Settings(**{**settings.model_dump(), **overrides})
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(settings)

    if args.expression is not None:
        outcome = run(args.expression)
        if not outcome.ok:
            print(outcome.render(), file=sys.stderr)
            return EXIT_FAILURE
        results, all_ok = [outcome.render(settings.precision)], True
    elif args.file:
        try:
            with open(args.file, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except OSError as e:
            print(f"Cannot read {args.file}: {e}", file=sys.stderr)
            return EXIT_USAGE
        logger.info("evaluating %d lines from %s", len(lines), args.file)
        results, all_ok = evaluate_lines(lines, settings.precision)
    elif args.interactive or stdin.isatty():
        return REPL(settings).loop()
    else:
        results, all_ok = evaluate_lines(stdin.read().splitlines(), settings.precision)

    try:
        _write_results(results, args.output)
    except OSError as e:
        print(f"Cannot write {args.output}: {e}", file=sys.stderr)
        return EXIT_USAGE
    return EXIT_OK if all_ok else EXIT_FAILURE


if __name__ == '__main__':
    sys.exit(main())
