"""
Command-line parsing into a validated ``SessionConfig``.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..models.config import AppConfig
from ..models.enums import MeasureMode, PrinterKind, SortKey
from ..models.session import ExclusionTarget, SessionConfig
from ..printers import get_printer_class
from ..symbols import SymbolResolver
from ..validation import (
    ResolutionError,
    UsageError,
    ValidationError,
    validate_directory,
    validate_positive_float,
)

logger = logging.getLogger(__name__)

DESCRIPTION = "Profile a Python script and print a report of where its time or memory went."

EPILOG = """\
exclusions:
  --exclude takes comma-separated entries of the form Scope#method (an
  instance method of a class) or Scope.method (a classmethod, staticmethod
  or module-level function), e.g. --exclude=json.decoder.JSONDecoder#decode
  an inherited method is excluded as a function, so Derived#method also
  hides calls to that method made through Base instances

paused sessions:
  with --start-paused, send SIGUSR1 to resume measurement and SIGUSR2 to
  pause it again
"""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message: str):
        raise UsageError(message)


def _non_negative_float(value: str) -> float:
    try:
        return validate_positive_float(value, min_value=0.0, field_name="min_percent")
    except ValidationError as e:
        raise argparse.ArgumentTypeError(str(e))


class ConfigParser:
    """
    Parses the argument vector into a ``SessionConfig``.

    Args:
        resolver: Resolves ``--exclude`` entries; defaults to the live interpreter
        app_config: Supplies defaults for printer, sort, mode and min_percent
        startup_dir: Directory the tool was started from; defaults to the
            current directory at parse time
    """

    def __init__(
        self,
        resolver: Optional[SymbolResolver] = None,
        app_config: Optional[AppConfig] = None,
        startup_dir: Optional[Path] = None,
        prog: str = "myprof",
    ):
        self.resolver = resolver or SymbolResolver()
        self.app_config = app_config or AppConfig()
        self.startup_dir = startup_dir
        self.parser = self.build_parser(prog)

    def _exclusion_list(self, value: str) -> List[ExclusionTarget]:
        try:
            return self.resolver.parse_exclusion_list(value)
        except ResolutionError as e:
            raise argparse.ArgumentTypeError(str(e))

    def build_parser(self, prog: str) -> argparse.ArgumentParser:
        from .. import __version__

        defaults = self.app_config.defaults
        parser = _ArgumentParser(
            prog=prog,
            usage=f"{prog} [options] <script.py> [script arguments]",
            description=DESCRIPTION,
            epilog=EPILOG,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            allow_abbrev=False,
        )
        parser.add_argument(
            "--allow_exceptions",
            action="store_true",
            help="Let exceptions raised by the script propagate instead of being logged and suppressed.",
        )
        parser.add_argument(
            "--eval-noprof",
            dest="pre_exec",
            action="append",
            default=[],
            metavar="CODE",
            help="Execute CODE before profiling starts. May be repeated.",
        )
        parser.add_argument(
            "--exclude",
            dest="exclude",
            action="extend",
            type=self._exclusion_list,
            default=[],
            metavar="LIST",
            help="Comma-separated methods to leave out of the profile (see below). May be repeated.",
        )
        parser.add_argument(
            "--exclude-common",
            action="store_true",
            help="Leave common iteration and dispatch builtins and the import machinery out of the profile.",
        )
        parser.add_argument(
            "-f",
            "--file",
            metavar="PATH",
            help="Write the report to PATH instead of stdout. Relative paths are taken from the "
                 "directory myprof was started in.",
        )
        parser.add_argument(
            "-m",
            "--min_percent",
            type=_non_negative_float,
            default=defaults.min_percent,
            metavar="FLOAT",
            help=f"Hide methods below this percentage of the total. Default: {defaults.min_percent:g}.",
        )
        parser.add_argument(
            "--mode",
            choices=MeasureMode.choices(),
            default=defaults.mode.value,
            help=f"What to measure. Default: {defaults.mode.value}.",
        )
        parser.add_argument(
            "-p",
            "--printer",
            choices=PrinterKind.choices(),
            default=defaults.printer.value,
            help=f"Report format. call_tree and multi write into a directory. Default: {defaults.printer.value}.",
        )
        parser.add_argument(
            "-R",
            "--require-noprof",
            dest="pre_libs",
            action="append",
            default=[],
            metavar="LIB",
            help="Import LIB before profiling starts. May be repeated.",
        )
        parser.add_argument(
            "-s",
            "--sort",
            choices=SortKey.choices(),
            default=defaults.sort.value,
            help=f"Sort textual reports by this column. Default: {defaults.sort.value}.",
        )
        parser.add_argument(
            "--start-paused",
            action="store_true",
            help="Start with measurement paused; the script resumes it (SIGUSR1).",
        )
        parser.add_argument(
            "--track_allocations",
            action="store_true",
            help="Also count memory blocks allocated by each method.",
        )
        parser.add_argument(
            "-v",
            "--version",
            action="version",
            version=f"%(prog)s {__version__}",
        )
        parser.add_argument("script", help="The Python script to profile.")
        parser.add_argument("script_args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
        return parser

    def format_usage(self) -> str:
        return self.parser.format_usage()

    def parse(self, argv: Optional[Sequence[str]] = None) -> SessionConfig:
        """
        Parse ``argv`` (``sys.argv[1:]`` when None).

        Raises:
            UsageError: For unknown options, missing or malformed values, an
                unresolvable exclusion, a missing script, or a directory
                renderer whose destination is not an existing directory
            SystemExit: With status 0 after printing help or the version
        """
        startup_dir = self.startup_dir or Path.cwd()
        args = self.parser.parse_args(argv)

        printer = PrinterKind(args.printer)
        if args.file is not None and not args.file.strip():
            raise UsageError("argument -f/--file: expected a non-empty path", field_name="file", value=args.file)
        file = Path(args.file) if args.file is not None else None
        working_dir = startup_dir if file is not None else None

        if get_printer_class(printer).needs_directory_output():
            if file is None:
                file = startup_dir
            if working_dir is None:
                working_dir = startup_dir
            try:
                validate_directory(file, base_dir=working_dir, field_name=f"--file for the {printer.value} printer")
            except ValidationError as e:
                raise UsageError(str(e), field_name="file", value=str(file)) from e

        exclude = tuple(dict.fromkeys(args.exclude))

        config = SessionConfig(
            script=args.script,
            script_args=tuple(args.script_args),
            allow_exceptions=args.allow_exceptions,
            exclude=exclude,
            exclude_common=args.exclude_common,
            file=file,
            measure_mode=MeasureMode(args.mode),
            min_percent=args.min_percent,
            printer=printer,
            sort_method=SortKey(args.sort),
            pre_libs=tuple(args.pre_libs),
            pre_exec=tuple(args.pre_exec),
            start_paused=args.start_paused,
            track_allocations=args.track_allocations,
            working_dir=working_dir,
        )
        logger.debug(f"Parsed session configuration: {config}")
        return config
