# console_blame.py
"""
Report where every output call comes from.

    blame = console_blame(logging, ["info", "error"])
    logging.info("hello")      # also prints  path/to/caller.py:12:5  and the code around it
    blame.restore()

Or run a whole script with print() and logging traps in place:

    python -m console_blame --context-size 1 my_script.py arg1 arg2
"""
import argparse
import builtins
import logging
import os
import runpy
import sys
from types import FrameType
from typing import Any, Mapping, Sequence

from blame_call_site import CallFrame, resolve_frames
from blame_errors import CallSiteError, ErrorLevel, OperationResult
from blame_logging import get_logger, logging_setup
from blame_middleware import MiddlewareRegistry, Stage
from blame_options import BlameOptions, read_config_file
from blame_printer import BlamePrinter
from blame_registry import BlameTrap, TrapRegistry

logger = get_logger()

# Output functions of the logging module. logging.exception() and logging.warn()
# are left out, they delegate to error() and warning() and would blame twice.
LOGGING_METHODS = ("debug", "info", "warning", "error", "critical", "log")

# The trap's own frame and its caller, nothing further up is printed
CALLER_FRAMES = 2


class ConsoleBlame:
    """
    Traps output methods of `target` and annotates each call with its call site.

    On every trapped call three middleware chains run, in this order:
        "console" - payload (args,), terminal calls the original method
        "file"    - payload (frames,), terminal prints the location row
        "code"    - payload (frames,), terminal prints the source window
    """

    def __init__(self, target: Any, methods: Sequence[str] | None = None, *,
                 stream=None, colors: bool | None = None, **options):
        self.target = target
        self.methods = tuple(methods) if methods is not None else None
        self.options = BlameOptions().merge(**options)
        self.printer = BlamePrinter(stream, colors)
        self.middleware = MiddlewareRegistry()
        self.registry = TrapRegistry(target, self._blame_call)

    def __repr__(self):
        return f"<ConsoleBlame target={self.target!r} trapped={self.registry.trapped_names()}>"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.restore()

    # ===== CONFIGURATION =====

    def configure(self, options: Mapping[str, Any] | None = None, **kwargs) -> "ConsoleBlame":
        """Overlay the given options on the current ones, unspecified keys are kept."""
        merged = dict(options or {}, **kwargs)
        self.options = self.options.merge(**merged)
        logger.debug(f"🔧 Options: {self.options}")
        return self

    def load_configuration(self, config_file: str) -> OperationResult:
        """Returns (success, error_message, severity)"""
        result, overrides = read_config_file(config_file, self.options)
        success, error_msg, severity = result
        if not success:
            if severity == ErrorLevel.FATAL:
                logger.error(f"❌ {error_msg}")
            else:
                logger.warning(f"⚠️ {error_msg}, keeping current options")
            return result

        if "colors" in overrides:
            self.printer.colors = overrides.pop("colors")
        self.options = self.options.merge(**overrides)
        return result

    def use(self, chain: str | Mapping[str, Stage | Sequence[Stage]], stage: Stage | None = None) -> "ConsoleBlame":
        """
        Register middleware.

            blame.use("console", stage)
            blame.use({"file": stage_a, "code": [stage_b, stage_c]})
        """
        if isinstance(chain, Mapping):
            self.middleware.add_many(chain)
        else:
            self.middleware.add(chain, stage)
        return self

    # ===== TRAPS =====

    def trap(self, *methods: str) -> "ConsoleBlame":
        """
        Trap the given methods. Without names the methods passed at construction
        are trapped, or every callable member of the target if there were none.
        """
        if methods:
            self.registry.install(methods)
        else:
            self.registry.install(self.methods)
        return self

    def restore(self, *methods: str) -> "ConsoleBlame":
        """Put back the originals of the given methods, or of all trapped ones."""
        self.registry.restore(methods or None)
        return self

    def is_trapped(self, method: str) -> bool:
        return self.registry.is_trapped(method)

    # ===== CALL PIPELINE =====

    def _blame_call(self, trap: BlameTrap, marker: FrameType, args: tuple, kwargs: dict) -> Any:
        result = None

        def call_original(*call_args):
            nonlocal result
            result = trap.original(*call_args, **kwargs)

        self.middleware.dispatch("console", call_original, args)

        frames = resolve_frames(marker, limit=CALLER_FRAMES, **self.options.trace_options())
        if len(frames) < 2:
            raise CallSiteError(trap.name, len(frames))

        self.middleware.dispatch("file", self._print_path, [frames])
        self.middleware.dispatch("code", self._print_sources, [frames])
        return result

    def _print_path(self, frames: list[CallFrame]) -> None:
        self.printer.print_path(frames[1], self.options)

    def _print_sources(self, frames: list[CallFrame]) -> None:
        self.printer.print_sources(frames[1], self.options)


def console_blame(target: Any = None, methods: Sequence[str] | None = None, **options) -> ConsoleBlame:
    """
    Create a ConsoleBlame and trap right away.

    console_blame()                      -> logging.debug/info/warning/error/critical/log
    console_blame(["info"])              -> logging.info only
    console_blame(builtins, ["print"])   -> print()
    console_blame(obj)                   -> every public method of obj
    """
    if isinstance(target, (list, tuple)):
        target, methods = None, target

    if target is None:
        target = logging
        if methods is None:
            methods = LOGGING_METHODS

    return ConsoleBlame(target, methods, **options).trap()


# ===== COMMAND LINE =====

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="console_blame",
        description="Run a Python script and show where each print() and logging call comes from.",
    )
    parser.add_argument("script", help="path of the script to run")
    parser.add_argument("script_args", nargs=argparse.REMAINDER, help="arguments passed to the script")
    parser.add_argument("--context-size", type=int, help="lines shown before and after the call site")
    parser.add_argument("--no-sources", action="store_true", help="print the location only")
    parser.add_argument("--line-format", help="source row template, fields {line} and {code}")
    parser.add_argument("--path-format", help="location template, fields {file}, {line} and {column}")
    parser.add_argument("--config", help=".ini file with a [console_blame] section")
    parser.add_argument("--no-print", action="store_true", help="do not trap print()")
    parser.add_argument("--no-logging", action="store_true", help="do not trap the logging module")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    parser.add_argument("--verbose", action="store_true", help="log what gets trapped")
    return parser


def _options_from_args(args: argparse.Namespace) -> dict:
    options = {}
    if args.context_size is not None:
        options["context_size"] = args.context_size
    if args.no_sources:
        options["sources"] = False
    if args.line_format is not None:
        options["line_format"] = args.line_format
    if args.path_format is not None:
        options["path_format"] = args.path_format
    return options


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging_setup(logging.DEBUG if args.verbose else logging.WARNING)

    if not os.path.isfile(args.script):
        print(f"❌ Script not found: {args.script}", file=sys.stderr)
        return 2

    colors = False if args.no_color else None
    blames = []
    if not args.no_print:
        blames.append(ConsoleBlame(builtins, ["print"], colors=colors))
    if not args.no_logging:
        blames.append(ConsoleBlame(logging, LOGGING_METHODS, colors=colors))

    try:
        for blame in blames:
            if args.config:
                success, error_msg, severity = blame.load_configuration(args.config)
                if not success and severity == ErrorLevel.FATAL:
                    print(f"❌ {error_msg}", file=sys.stderr)
                    return 2
            blame.configure(_options_from_args(args))
    except (TypeError, ValueError) as e:
        print(f"❌ Invalid options: {e}", file=sys.stderr)
        return 2

    saved_argv = sys.argv
    sys.argv = [args.script, *args.script_args]
    try:
        for blame in blames:
            blame.trap()
        runpy.run_path(args.script, run_name="__main__")
    except SystemExit as e:
        if e.code is None:
            return 0
        if isinstance(e.code, int):
            return e.code
        print(e.code, file=sys.stderr)
        return 1
    finally:
        for blame in blames:
            blame.restore()
        sys.argv = saved_argv
    return 0


if __name__ == "__main__":
    sys.exit(main())
