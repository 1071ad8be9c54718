"""
Text call graph renderer.

Each method is printed with the callers above it and the callees below it,
in the layout gprof popularised.
"""

from typing import IO

from ..models.enums import PrinterKind, SortKey
from .base import AbstractPrinter

SEPARATOR = "-" * 100


class GraphPrinter(AbstractPrinter):
    """Prints callers and callees for every method above ``min_percent`` of total."""

    kind = PrinterKind.GRAPH

    def render(self, destination: IO[str], min_percent: float = 0.0, sort_method: SortKey = SortKey.TOTAL) -> None:
        result = self.result
        fmt = result.format_value

        for line in self.header_lines(sort_method):
            destination.write(line + "\n")
        destination.write("\n")
        destination.write(
            f"{'%total':>7} {'%self':>7}  {'total':>12}  {'self':>12}  {'wait':>12}  {'child':>12}  {'calls':>13}  name\n"
        )

        for info in self.selected_methods(min_percent, sort_method):
            destination.write(SEPARATOR + "\n")

            for caller_key, stat in sorted(info.callers.items(), key=lambda item: -item[1].total_time):
                caller_name = caller_key.full_name
                destination.write(
                    f"{'':>7} {'':>7}  {fmt(stat.total_time):>12}  {'':>12}  {'':>12}  {'':>12}"
                    f"  {f'{stat.calls}/{info.called}':>13}      {caller_name}\n"
                )

            recursion = " *" if info.recursive else ""
            destination.write(
                f"{result.percent(info.total_time):6.2f}% {result.percent(info.self_time):6.2f}%"
                f"  {fmt(info.total_time):>12}  {fmt(info.self_time):>12}  {fmt(info.wait_time):>12}"
                f"  {fmt(info.children_time):>12}  {info.called:>13}  {info.full_name}{recursion}\n"
            )

            for callee_key, stat in sorted(info.callees.items(), key=lambda item: -item[1].total_time):
                callee = result.method(callee_key)
                called = callee.called if callee is not None else stat.calls
                destination.write(
                    f"{'':>7} {'':>7}  {fmt(stat.total_time):>12}  {'':>12}  {'':>12}  {'':>12}"
                    f"  {f'{stat.calls}/{called}':>13}      {callee_key.full_name}\n"
                )

        destination.write(SEPARATOR + "\n")
        destination.write("\n* indicates recursively called methods\n")
