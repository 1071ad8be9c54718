"""
Graphviz renderer.

Emits a ``digraph`` with one node per method above ``min_percent`` of total
and an edge for every caller/callee pair between shown methods.
"""

from typing import IO

from ..models.enums import PrinterKind, SortKey
from .base import AbstractPrinter


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DotPrinter(AbstractPrinter):
    """Writes the call graph in Graphviz dot syntax."""

    kind = PrinterKind.DOT

    def render(self, destination: IO[str], min_percent: float = 0.0, sort_method: SortKey = SortKey.TOTAL) -> None:
        result = self.result
        methods = self.selected_methods(min_percent, sort_method)
        node_names = {info.key: f"N{index}" for index, info in enumerate(methods)}

        title = f"{result.measure_mode.value} total {result.format_value(result.total_time)} {result.unit}"
        destination.write("digraph \"Profile\" {\n")
        destination.write(f"  label={_quote(title)};\n")
        destination.write("  labelloc=t;\n  labeljust=l;\n")
        destination.write("  node [shape=box, fontname=Helvetica];\n")

        for info in methods:
            label = (
                f"{info.full_name}\\n"
                f"{result.percent(info.total_time):.2f}% total, {result.percent(info.self_time):.2f}% self\\n"
                f"{info.called} calls"
            )
            destination.write(f"  {node_names[info.key]} [label=\"{label}\"];\n")

        for info in methods:
            for callee_key, stat in info.callees.items():
                if callee_key not in node_names:
                    continue
                destination.write(
                    f"  {node_names[info.key]} -> {node_names[callee_key]}"
                    f" [label={_quote(f'{stat.calls} calls')}];\n"
                )

        destination.write("}\n")
