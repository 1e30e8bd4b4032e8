# ABOUTME: Rich table utilities for styled, colorful CLI displays
# ABOUTME: Pre-configured tables for the ingestion artifact, run states and logging status

from typing import Any

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

from fuel_price_ingest.core.models import IngestionArtifact, RunState, format_timestamp


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two-column key-value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, width=None, no_wrap=False)
    table.add_column("Value", style=value_style, width=None, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_artifact_table(artifact: IngestionArtifact, states: list[RunState] | None = None) -> Table:
    """Create a styled table for an ingestion artifact.

    Args:
        artifact: The artifact to display
        states: Pipeline states visited, when the artifact comes from a fresh run

    Returns:
        Status table with icons and color coding
    """
    if artifact.has_value:
        price = f"✅ ${artifact.extracted_value:.2f}/gal"
    else:
        price = "❌ Not available"

    data = {
        "🌐 Source URL": artifact.url,
        "🔎 Method": artifact.method_descriptor,
        "⛽ Price": price,
        "🎯 Confidence": artifact.confidence.value if artifact.confidence else "-",
        "📅 Captured At": format_timestamp(artifact.captured_at),
    }
    if artifact.failure_reason:
        data["⚠️ Failure Reason"] = artifact.failure_reason
    if states:
        data["🔄 States"] = " → ".join(state.value for state in states)

    return create_key_value_table(
        title="⛽ Fuel Price Artifact",
        data=data,
        title_style="bold magenta",
        key_style="cyan",
        value_style="white",
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    # Add log files if they exist
    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing and style.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()  # Add spacing before
    console.print(table)
    console.print()  # Add spacing after
