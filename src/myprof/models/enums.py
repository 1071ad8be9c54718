"""
Enumerations shared by the configuration, engine and renderers.
"""

from enum import Enum
from typing import List


class _ChoiceEnum(str, Enum):
    """String enum whose values double as command-line choices."""

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]

    def __str__(self) -> str:
        return self.value


class MeasureMode(_ChoiceEnum):
    """Quantity sampled by the measurement engine."""

    WALL_TIME = "wall"
    PROCESS_TIME = "process"
    ALLOCATIONS = "allocations"
    MEMORY = "memory"


class PrinterKind(_ChoiceEnum):
    """The fixed set of report renderers."""

    FLAT = "flat"
    FLAT_WITH_LINE_NUMBERS = "flat_with_line_numbers"
    GRAPH = "graph"
    GRAPH_HTML = "graph_html"
    CALL_TREE = "call_tree"
    CALL_STACK = "call_stack"
    DOT = "dot"
    MULTI = "multi"


class SortKey(_ChoiceEnum):
    """Column used to order textual reports."""

    TOTAL = "total"
    SELF = "self"
    WAIT = "wait"
    CHILD = "child"

    @property
    def attribute(self) -> str:
        """Name of the ``MethodInfo`` attribute this key sorts by."""
        return {
            SortKey.TOTAL: "total_time",
            SortKey.SELF: "self_time",
            SortKey.WAIT: "wait_time",
            SortKey.CHILD: "children_time",
        }[self]
