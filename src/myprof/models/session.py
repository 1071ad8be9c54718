"""
Session data models.

These records carry the parsed command line through the pipeline:
``SessionConfig`` is produced by the CLI parser, ``ExclusionTarget`` by the
symbol resolver, and ``OutputPlan`` is derived once when the report is routed.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import FunctionType
from typing import TYPE_CHECKING, Optional, Tuple, Union

from .enums import MeasureMode, PrinterKind, SortKey

if TYPE_CHECKING:
    from ..symbols.scopes import ClassLevelScope, ObjectScope


@dataclass(frozen=True)
class ExclusionTarget:
    """
    A resolved ``(scope, method)`` pair marked to be left out of measurement.

    ``scope`` is either the instance-level scope of a class or the
    class-level companion of a class or module.
    """

    scope: Union["ObjectScope", "ClassLevelScope"]
    method: str
    # The Python function the pair resolved to; identity is the (scope, method) pair.
    function: FunctionType = field(compare=False, repr=False)

    @property
    def is_class_level(self) -> bool:
        return getattr(self.scope, "is_class_level", False)

    @property
    def separator(self) -> str:
        return "." if self.is_class_level else "#"

    def __str__(self) -> str:
        return f"{self.scope.qualified_name}{self.separator}{self.method}"


@dataclass(frozen=True)
class SessionConfig:
    """
    Everything the command line asked for, validated.

    Immutable once parsed. ``working_dir`` is the directory the tool was
    started from; it is captured whenever a destination is in play.
    """

    script: str
    script_args: Tuple[str, ...] = ()
    allow_exceptions: bool = False
    exclude: Tuple[ExclusionTarget, ...] = ()
    exclude_common: bool = False
    file: Optional[Path] = None
    measure_mode: MeasureMode = MeasureMode.WALL_TIME
    min_percent: float = 0.0
    printer: PrinterKind = PrinterKind.FLAT
    sort_method: SortKey = SortKey.TOTAL
    pre_libs: Tuple[str, ...] = ()
    pre_exec: Tuple[str, ...] = ()
    start_paused: bool = False
    track_allocations: bool = False
    working_dir: Optional[Path] = None


@dataclass(frozen=True)
class OutputPlan:
    """
    Where a report goes: stdout, a single file, or a directory tree.
    """

    file: Optional[Path]
    is_directory: bool
    working_dir: Path

    @classmethod
    def from_config(cls, config: SessionConfig, startup_dir: Optional[Path] = None) -> "OutputPlan":
        """
        Derive the plan from a parsed configuration.

        ``startup_dir`` is used when the configuration did not capture a
        working directory (only possible when no destination was given).
        Directory renderers without a destination write into the working
        directory.
        """
        from ..printers import get_printer_class

        is_directory = get_printer_class(config.printer).needs_directory_output()
        working_dir = config.working_dir or startup_dir or Path.cwd()
        file = config.file
        if file is None and is_directory:
            file = working_dir
        return cls(
            file=file,
            is_directory=is_directory,
            working_dir=working_dir,
        )
