"""
Call stack renderer.

Draws the call tree as an interactive plotly icicle chart, each call path
sized by its self cost so nested paths add up to their parent.
"""

import logging
from typing import IO

import plotly.graph_objects as go

from ..models.enums import PrinterKind, SortKey
from .base import AbstractPrinter

logger = logging.getLogger(__name__)


class CallStackPrinter(AbstractPrinter):
    """Writes the call tree as an HTML icicle chart."""

    kind = PrinterKind.CALL_STACK

    def build_figure(self, min_percent: float = 0.0) -> go.Figure:
        result = self.result
        ids, labels, parents, values, hover = [], [], [], [], []
        node_ids = {}

        for node in result.iter_nodes():
            if result.percent(node.total_time) < min_percent:
                continue
            parent_id = node_ids.get(id(node.parent), "")
            if node.parent is not result.root and not parent_id:
                # Parent was filtered out.
                continue
            node_id = f"n{len(ids)}"
            node_ids[id(node)] = node_id
            ids.append(node_id)
            labels.append(node.key.full_name)
            parents.append(parent_id)
            values.append(node.self_time)
            hover.append(
                f"{node.key.full_name}<br>{node.key.location}<br>"
                f"total {result.format_value(node.total_time)} ({result.percent(node.total_time):.2f}%)<br>"
                f"calls {node.calls}"
            )

        icicle = go.Icicle(
            ids=ids,
            labels=labels,
            parents=parents,
            values=values,
            branchvalues="remainder",
            hovertext=hover,
            hoverinfo="text",
        )
        fig = go.Figure(icicle)
        fig.update_layout(
            title=f"Call stack: {result.measure_mode.value}, total {result.format_value(result.total_time)} {result.unit}",
            margin=dict(t=50, l=10, r=10, b=10),
        )
        return fig

    def render(self, destination: IO[str], min_percent: float = 0.0, sort_method: SortKey = SortKey.TOTAL) -> None:
        fig = self.build_figure(min_percent)
        destination.write(fig.to_html(full_html=True, include_plotlyjs="cdn"))
