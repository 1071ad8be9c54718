"""
Flat profile renderers.

One row per method with self, total, wait and child cost. Rows are built
into a polars frame so sorting and filtering happen column-wise.
"""

import logging
from typing import IO

import polars as pl

from ..models.enums import PrinterKind, SortKey
from .base import AbstractPrinter

logger = logging.getLogger(__name__)

FLAT_SCHEMA = {
    "name": pl.Utf8,
    "location": pl.Utf8,
    "total": pl.Float64,
    "self": pl.Float64,
    "wait": pl.Float64,
    "child": pl.Float64,
    "calls": pl.Int64,
    "allocations": pl.Float64,
}


def build_method_frame(result, sort_method: SortKey = SortKey.TOTAL) -> pl.DataFrame:
    """
    Build a frame with one row per method, sorted by ``sort_method``.

    Columns are named after the sort keys so the sort key maps directly
    onto a column; ``pct_self`` and ``pct_total`` are percentages of the
    overall total.
    """
    rows = [
        {
            "name": info.full_name,
            "location": info.key.location,
            "total": info.total_time,
            "self": info.self_time,
            "wait": info.wait_time,
            "child": info.children_time,
            "calls": info.called,
            "allocations": info.allocations,
        }
        for info in result.methods
    ]
    df = pl.DataFrame(rows, schema=FLAT_SCHEMA)

    total = result.total_time
    if total > 0:
        df = df.with_columns(
            (pl.col("self") / total * 100.0).alias("pct_self"),
            (pl.col("total") / total * 100.0).alias("pct_total"),
        )
    else:
        df = df.with_columns(
            pl.lit(0.0).alias("pct_self"),
            pl.lit(0.0).alias("pct_total"),
        )
    return df.sort([SortKey(sort_method).value, "name"], descending=[True, False])


class FlatPrinter(AbstractPrinter):
    """Prints a flat profile, filtering on each method's share of self cost."""

    kind = PrinterKind.FLAT
    show_line_numbers = False

    def render(self, destination: IO[str], min_percent: float = 0.0, sort_method: SortKey = SortKey.TOTAL) -> None:
        result = self.result
        df = build_method_frame(result, sort_method).filter(pl.col("pct_self") >= min_percent)

        for line in self.header_lines(sort_method):
            destination.write(line + "\n")
        destination.write("\n")

        columns = f" {'%self':>6}  {'total':>12}  {'self':>12}  {'wait':>12}  {'child':>12}  {'calls':>8}"
        if result.track_allocations:
            columns += f"  {'allocs':>10}"
        destination.write(columns + "  name\n")

        for row in df.iter_rows(named=True):
            line = (
                f" {row['pct_self']:6.2f}"
                f"  {result.format_value(row['total']):>12}"
                f"  {result.format_value(row['self']):>12}"
                f"  {result.format_value(row['wait']):>12}"
                f"  {result.format_value(row['child']):>12}"
                f"  {row['calls']:>8}"
            )
            if result.track_allocations:
                line += f"  {row['allocations']:>10.0f}"
            line += f"  {row['name']}"
            if self.show_line_numbers:
                line += f"  {row['location']}"
            destination.write(line + "\n")

        hidden = len(result.methods) - df.height
        if hidden:
            destination.write(f"\n* {hidden} methods below {min_percent:g}% self not shown\n")


class FlatWithLineNumbersPrinter(FlatPrinter):
    """Flat profile with each method's defining file and line."""

    kind = PrinterKind.FLAT_WITH_LINE_NUMBERS
    show_line_numbers = True
