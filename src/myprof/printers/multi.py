"""
Renderer that writes several reports into one directory.
"""

import logging
from pathlib import Path
from typing import Union

from ..engine.results import ResultSet
from ..models.enums import PrinterKind, SortKey
from .base import DirectoryPrinter
from .call_stack import CallStackPrinter
from .call_tree import CallTreePrinter
from .flat import FlatPrinter
from .graph import GraphPrinter
from .graph_html import GraphHtmlPrinter

logger = logging.getLogger(__name__)


class MultiPrinter(DirectoryPrinter):
    """
    Writes the flat, graph, HTML graph, call stack and callgrind reports.

    Stream reports are named ``<profile_name>.<suffix>``; the callgrind file
    keeps its own ``callgrind.out.<pid>`` name.
    """

    kind = PrinterKind.MULTI

    STREAM_REPORTS = (
        (FlatPrinter, "flat.txt"),
        (GraphPrinter, "graph.txt"),
        (GraphHtmlPrinter, "graph.html"),
        (CallStackPrinter, "stack.html"),
    )

    def __init__(self, result: ResultSet, profile_name: str = "profile"):
        super().__init__(result)
        self.profile_name = profile_name

    def file_names(self):
        names = [f"{self.profile_name}.{suffix}" for _, suffix in self.STREAM_REPORTS]
        names.append(CallTreePrinter(self.result).file_name())
        return names

    def render(
        self,
        destination: Union[str, Path],
        min_percent: float = 0.0,
        sort_method: SortKey = SortKey.TOTAL,
    ) -> None:
        for printer_class, suffix in self.STREAM_REPORTS:
            with self._open(destination, f"{self.profile_name}.{suffix}") as out:
                printer_class(self.result).render(out, min_percent=min_percent, sort_method=sort_method)
        CallTreePrinter(self.result).render(destination, min_percent=min_percent, sort_method=sort_method)
        logger.info(f"Wrote {len(self.file_names())} reports to {destination}")
