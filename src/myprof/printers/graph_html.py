"""
HTML call graph renderer.

The graph is laid out as a plotly table: one row per method, with its
callers and callees listed alongside.
"""

import logging
from typing import IO

import plotly.graph_objects as go

from ..models.enums import PrinterKind, SortKey
from .base import AbstractPrinter

logger = logging.getLogger(__name__)


class GraphHtmlPrinter(AbstractPrinter):
    """Writes a self-contained HTML page with the call graph table."""

    kind = PrinterKind.GRAPH_HTML

    def build_figure(self, min_percent: float = 0.0, sort_method: SortKey = SortKey.TOTAL) -> go.Figure:
        result = self.result
        fmt = result.format_value
        methods = self.selected_methods(min_percent, sort_method)

        def edges(mapping):
            return "<br>".join(
                f"{stat.calls}× {key.full_name} ({fmt(stat.total_time)})"
                for key, stat in sorted(mapping.items(), key=lambda item: -item[1].total_time)
            )

        columns = {
            "%total": [f"{result.percent(m.total_time):.2f}" for m in methods],
            "%self": [f"{result.percent(m.self_time):.2f}" for m in methods],
            "total": [fmt(m.total_time) for m in methods],
            "self": [fmt(m.self_time) for m in methods],
            "wait": [fmt(m.wait_time) for m in methods],
            "child": [fmt(m.children_time) for m in methods],
            "calls": [m.called for m in methods],
            "name": [m.full_name for m in methods],
            "callers": [edges(m.callers) for m in methods],
            "callees": [edges(m.callees) for m in methods],
        }

        table = go.Table(
            header=dict(values=list(columns.keys()), fill_color="#e5ecf6", align="left"),
            cells=dict(values=list(columns.values()), align="left"),
        )
        fig = go.Figure(data=[table])
        fig.update_layout(
            title=(
                f"Call graph: {result.measure_mode.value}, "
                f"total {fmt(result.total_time)} {result.unit}, sorted by {SortKey(sort_method).value}"
            ),
            template="plotly_white",
        )
        return fig

    def render(self, destination: IO[str], min_percent: float = 0.0, sort_method: SortKey = SortKey.TOTAL) -> None:
        fig = self.build_figure(min_percent, sort_method)
        destination.write(fig.to_html(full_html=True, include_plotlyjs="cdn"))
