"""
CLI utilities for terminal output.

Rich tables and panels for the scan command.
"""

from typing import Optional, Sequence

import pandas as pd
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table


def get_console() -> Console:
    return Console()


def format_cell(value) -> str:
    """Render floats compactly and missing values as '-'."""
    if value is None:
        return "-"
    if isinstance(value, float):
        if pd.isna(value):
            return "-"
        return f"{value:.3f}"
    return str(value)


def print_table(
    data: Sequence[Sequence],
    headers: Sequence[str],
    title: Optional[str] = None,
    show_lines: bool = False,
    console: Optional[Console] = None,
) -> None:
    """Print data as a formatted table."""
    console = console or get_console()

    table = Table(title=title, box=box.ROUNDED, show_lines=show_lines)
    for header in headers:
        table.add_column(header)

    for row in data:
        table.add_row(*[format_cell(v) for v in row])

    console.print(table)


def print_dataframe(
    df: pd.DataFrame,
    title: Optional[str] = None,
    max_rows: Optional[int] = None,
    console: Optional[Console] = None,
) -> None:
    """Print a DataFrame as a table, truncated to max_rows."""
    shown = df if max_rows is None else df.head(max_rows)
    rows = [list(r) for r in shown.itertuples(index=False, name=None)]
    print_table(rows, [str(c) for c in df.columns], title=title, console=console)
    if max_rows is not None and len(df) > max_rows:
        (console or get_console()).print(f"... {len(df) - max_rows} more rows")


def print_panel(
    content: str,
    title: Optional[str] = None,
    style: str = "blue",
    console: Optional[Console] = None,
) -> None:
    """Print content in a panel."""
    console = console or get_console()
    console.print(Panel(content, title=title, style=style))
