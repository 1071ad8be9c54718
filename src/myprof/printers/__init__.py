"""
Report renderers.

The set of renderers is fixed; ``get_printer_class`` maps a ``PrinterKind``
to its class and ``create_printer`` builds one for a result set.
"""

import logging
from typing import Dict, Type

from ..engine.results import ResultSet
from ..models.enums import PrinterKind
from .base import AbstractPrinter, DirectoryPrinter
from .call_stack import CallStackPrinter
from .call_tree import CallTreePrinter
from .dot import DotPrinter
from .flat import FlatPrinter, FlatWithLineNumbersPrinter, build_method_frame
from .graph import GraphPrinter
from .graph_html import GraphHtmlPrinter
from .multi import MultiPrinter

logger = logging.getLogger(__name__)

PRINTERS: Dict[PrinterKind, Type[AbstractPrinter]] = {
    PrinterKind.FLAT: FlatPrinter,
    PrinterKind.FLAT_WITH_LINE_NUMBERS: FlatWithLineNumbersPrinter,
    PrinterKind.GRAPH: GraphPrinter,
    PrinterKind.GRAPH_HTML: GraphHtmlPrinter,
    PrinterKind.CALL_TREE: CallTreePrinter,
    PrinterKind.CALL_STACK: CallStackPrinter,
    PrinterKind.DOT: DotPrinter,
    PrinterKind.MULTI: MultiPrinter,
}


def get_printer_class(kind: PrinterKind) -> Type[AbstractPrinter]:
    """
    Look up the renderer class for a kind.

    Raises:
        ValueError: If the kind is not a known renderer
    """
    try:
        return PRINTERS[PrinterKind(kind)]
    except (KeyError, ValueError):
        raise ValueError(f"Unsupported printer: {kind}")


def create_printer(kind: PrinterKind, result: ResultSet) -> AbstractPrinter:
    """Create a renderer of the given kind for ``result``."""
    printer_class = get_printer_class(kind)
    logger.debug(f"Creating {printer_class.__name__}")
    return printer_class(result)


__all__ = [
    "PRINTERS",
    "AbstractPrinter",
    "DirectoryPrinter",
    "CallStackPrinter",
    "CallTreePrinter",
    "DotPrinter",
    "FlatPrinter",
    "FlatWithLineNumbersPrinter",
    "GraphPrinter",
    "GraphHtmlPrinter",
    "MultiPrinter",
    "build_method_frame",
    "create_printer",
    "get_printer_class",
]
