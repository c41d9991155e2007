"""Command-line entry point: run a Roughcut file, or the interactive loop over stdin."""

import argparse
import logging
import sys

from roughcut.config import get_log_level
from roughcut.errors import RoughcutError, RoughcutExit
from roughcut.interpreter import Interpreter

# deep recursion in Lisp code recurses in the evaluator
RECURSION_LIMIT = 20000


def main(argv=None) -> int:
    """Runs the Roughcut interpreter. Called from the roughcut console script."""
    parser = argparse.ArgumentParser(prog="roughcut")
    parser.add_argument("file", help="file to evaluate (if empty, reads forms from stdin)", nargs="?")
    parser.add_argument("--no-prompt", action="store_true", help="no prompts and no '=> ' before results")
    parser.add_argument("--no-prelude", action="store_true", help="do not load the bootstrap library")
    parser.add_argument("--log-level", default=None, type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="logging level (default: $ROUGHCUT_LOG_LEVEL or WARNING)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level or get_log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

    try:
        itp = Interpreter(prelude=not args.no_prelude)
    except RoughcutError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    if args.file is None:
        return itp.repl(prompt=not args.no_prompt)

    try:
        itp.load(args.file)
    except RoughcutExit as exc:
        return exc.status
    except Exception as exc:
        itp.report(exc, sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
