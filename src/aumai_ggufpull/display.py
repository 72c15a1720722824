"""Presentation helpers: catalog tables, usage text and the download bar."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.table import Table
from rich.text import Text

from .models import ModelRecord

__all__ = [
    "build_models_table",
    "format_model_row",
    "make_download_progress",
    "more_models_hint",
    "simple_usage",
    "truncate",
    "usage_examples",
]

PROG_NAME = "aumai-ggufpull"

NAME_WIDTH = 20
SIZES_WIDTH = 30
CAPABILITIES_WIDTH = 30
INFO_WIDTH = 20

HEADER_STYLE = "cyan"


def truncate(text: str, width: int) -> str:
    """Shorten *text* with a trailing ``...`` when it does not fit *width*."""
    if len(text) > width - 3:
        return text[: max(width - 6, 0)] + "..."
    return text


def format_model_row(record: ModelRecord, show_details: bool) -> list[str]:
    """Return the cell strings for one catalog row."""
    row = [record.name, truncate(", ".join(record.size_variants), SIZES_WIDTH)]
    if show_details:
        row.append(truncate(", ".join(record.capability_tags), CAPABILITIES_WIDTH))
        row.append(record.pull_count)
        row.append(record.updated_at)
    return row


def _name_width(records: Sequence[ModelRecord]) -> int:
    width = NAME_WIDTH
    for record in records:
        if len(record.name) > width - 3:
            width = len(record.name) + 3
    return width


def build_models_table(records: Sequence[ModelRecord], show_details: bool) -> Table:
    """
    Build the catalog table.

    The short form has MODEL and AVAILABLE SIZES; ``show_details`` adds
    CAPABILITIES, DOWNLOADS and UPDATED.
    """
    table = Table(
        box=None,
        header_style=HEADER_STYLE,
        show_edge=False,
        pad_edge=False,
        padding=(0, 1, 0, 0),
    )
    table.add_column("MODEL", style="green", min_width=_name_width(records), no_wrap=True)
    table.add_column("AVAILABLE SIZES", style="yellow", min_width=SIZES_WIDTH)
    if show_details:
        table.add_column("CAPABILITIES", style="cyan", min_width=CAPABILITIES_WIDTH)
        table.add_column("DOWNLOADS", min_width=INFO_WIDTH)
        table.add_column("UPDATED")

    for record in records:
        table.add_row(*(Text(cell) for cell in format_model_row(record, show_details)))
    return table


def more_models_hint(hidden: int) -> str:
    return f"... and {hidden} more (use -list to see all)"


def simple_usage() -> str:
    """Short usage shown after the abbreviated listing."""
    return "\n".join(
        [
            "Simple Usage:",
            f"  List models:  {PROG_NAME} -list",
            f"  Download:     {PROG_NAME} -model MODEL -params PARAMS",
            f"  Help:         {PROG_NAME} -help",
            "",
            "Quick Examples:",
            f"  {PROG_NAME} -model llama2 -params 7b",
            f"  {PROG_NAME} -model phi -params latest",
        ]
    )


def usage_examples() -> str:
    return "\n".join(
        [
            "Command-line Usage Examples:",
            "  # List all available models:",
            f"  {PROG_NAME}",
            f"  {PROG_NAME} -list",
            "",
            "  # Download a specific model:",
            f"  {PROG_NAME} -model llama2 -params 7b",
            f"  {PROG_NAME} -model phi -params latest",
            f"  {PROG_NAME} -model mistral -params 7b-instruct",
            "",
            "  # The downloaded file will be saved as:",
            "  # modelname:params.gguf (e.g., llama2:7b.gguf)",
        ]
    )


def make_download_progress(console: Console | None = None) -> Progress:
    """
    Progress bar for blob downloads.

    A task created with ``total=None`` renders as a pulsing bar, which is
    what a response without Content-Length gets.
    """
    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=console,
    )
