"""
Abstract base class for report renderers.

Every renderer is constructed from a ``ResultSet`` and writes one report
format. Stream renderers write to an open text stream; directory renderers
(``needs_directory_output() is True``) receive a directory path and write
one or more files into it.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, List, Union

from ..engine.results import MethodInfo, ResultSet
from ..models.enums import PrinterKind, SortKey

logger = logging.getLogger(__name__)

Destination = Union[IO[str], str, Path]


class AbstractPrinter(ABC):
    """Abstract base class for report renderers."""

    kind: PrinterKind

    def __init__(self, result: ResultSet):
        self.result = result

    @classmethod
    def needs_directory_output(cls) -> bool:
        """Whether ``render`` expects a directory path instead of a stream."""
        return False

    @abstractmethod
    def render(
        self,
        destination: Destination,
        min_percent: float = 0.0,
        sort_method: SortKey = SortKey.TOTAL,
    ) -> None:
        """
        Write the report.

        Args:
            destination: Text stream, or a directory path for directory renderers
            min_percent: Hide methods below this share of the total
            sort_method: Ordering for textual reports
        """
        pass

    def selected_methods(
        self,
        min_percent: float,
        sort_method: SortKey,
        by: str = "total_time",
    ) -> List[MethodInfo]:
        """Methods ordered by ``sort_method`` whose ``by`` share reaches ``min_percent``."""
        return [
            info for info in self.result.sorted_methods(sort_method)
            if self.result.percent(getattr(info, by)) >= min_percent
        ]

    def header_lines(self, sort_method: SortKey) -> List[str]:
        result = self.result
        lines = [
            f"Measure Mode: {result.measure_mode.value}",
            f"Total: {result.format_value(result.total_time)} {result.unit}",
            f"Sort by: {SortKey(sort_method).value}",
        ]
        process = result.process
        if process is not None:
            lines.append(f"Process: {process.pid}")
            if process.rss_bytes is not None:
                lines.append(f"Resident memory at stop: {process.rss_bytes} bytes")
            if process.cpu_user is not None:
                lines.append(f"CPU time: {process.cpu_user:.2f}s user, {process.cpu_system:.2f}s system")
        return lines


class DirectoryPrinter(AbstractPrinter):
    """Base class for renderers whose output is a tree of files."""

    @classmethod
    def needs_directory_output(cls) -> bool:
        return True

    @staticmethod
    def _open(directory: Union[str, Path], name: str) -> IO[str]:
        path = Path(directory) / name
        logger.debug(f"Writing {path}")
        return open(path, "w", encoding="utf-8")
