"""
Callgrind renderer.

Writes ``callgrind.out.<pid>`` into the destination directory for viewing
in KCachegrind or QCachegrind. Callgrind costs are integers, so times are
written in microseconds.
"""

import logging
from pathlib import Path
from typing import IO, Union

from ..engine.results import MethodInfo
from ..models.enums import PrinterKind, SortKey
from .base import DirectoryPrinter

logger = logging.getLogger(__name__)


class CallTreePrinter(DirectoryPrinter):
    """Writes a callgrind profile into a directory."""

    kind = PrinterKind.CALL_TREE

    def file_name(self) -> str:
        pid = self.result.process.pid if self.result.process is not None else 0
        return f"callgrind.out.{pid}"

    def _cost(self, value: float) -> int:
        if self.result.unit == "seconds":
            return int(round(value * 1_000_000))
        return int(round(value))

    def _event_name(self) -> str:
        if self.result.unit == "seconds":
            return f"{self.result.measure_mode.value}_time_us"
        return self.result.measure_mode.value

    def _write_method(self, out: IO[str], info: MethodInfo) -> None:
        key = info.key
        out.write(f"fl={key.filename or '<built-in>'}\n")
        out.write(f"fn={key.full_name}\n")
        out.write(f"{key.lineno} {self._cost(info.self_time)}\n")
        for callee_key, stat in info.callees.items():
            out.write(f"cfl={callee_key.filename or '<built-in>'}\n")
            out.write(f"cfn={callee_key.full_name}\n")
            out.write(f"calls={stat.calls} {callee_key.lineno}\n")
            out.write(f"{key.lineno} {self._cost(stat.total_time)}\n")
        out.write("\n")

    def render(
        self,
        destination: Union[str, Path],
        min_percent: float = 0.0,
        sort_method: SortKey = SortKey.TOTAL,
    ) -> None:
        with self._open(destination, self.file_name()) as out:
            out.write("# callgrind format\n")
            out.write("version: 1\n")
            out.write("creator: myprof\n")
            if self.result.process is not None:
                out.write(f"pid: {self.result.process.pid}\n")
            out.write("positions: line\n")
            out.write(f"events: {self._event_name()}\n")
            out.write(f"summary: {self._cost(self.result.total_time)}\n\n")
            for info in self.result.sorted_methods(sort_method):
                self._write_method(out, info)
        logger.info(f"Wrote callgrind profile to {Path(destination) / self.file_name()}")
