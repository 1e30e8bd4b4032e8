# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands to run the ingestion pipeline and inspect the resulting artifact

import json
from pathlib import Path

import asyncclick as click
from rich.console import Console
from rich.panel import Panel

from fuel_price_ingest.config import get_config
from fuel_price_ingest.persistence import PersistenceError, gas_price_payload, read_artifact, serialize_artifact
from fuel_price_ingest.utils.logging import LoggingMode, configure_logging, get_logger, get_logging_status
from fuel_price_ingest.utils.rich_tables import (
    create_artifact_table,
    create_logging_status_table,
    print_rich_table,
)

console = Console()


@click.command()
@click.option("--strategy", type=click.Choice(["dom", "schema"]), help="Primary extraction strategy")
@click.option("--fallback/--no-fallback", default=None, help="Try the other strategy if the primary one fails")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Artifact path (defaults to config)")
@click.pass_context
async def run(ctx, strategy: str | None, fallback: bool | None, output: Path | None):
    """
    ⛽ Run the configured fuel price pipeline.

    Extraction failures still write an artifact with a null price and exit 0.
    Only a failure to write the artifact exits non-zero.
    """
    from fuel_price_ingest.core.pipeline import PipelineOrchestrator, task_from_config

    json_output = ctx.obj["json_output"]
    logger = get_logger(__name__)

    overrides = {}
    if strategy is not None:
        overrides["strategy"] = strategy
    if fallback is not None:
        overrides["fallback_enabled"] = fallback
    config = get_config().model_copy(update=overrides)

    artifact_path = output or config.artifact_path
    task = task_from_config(config)

    if not json_output:
        console.print(
            Panel.fit(
                f"⛽ [bold cyan]Fuel Price Ingest[/bold cyan]\n{task.source_url}\n{task.method.descriptor}",
                border_style="magenta",
            )
        )

    orchestrator = PipelineOrchestrator(config=config)
    try:
        report = await orchestrator.run(task, artifact_path)
    except PersistenceError as e:
        logger.error("Pipeline could not persist its artifact", error=str(e))
        if not json_output:
            console.print(f"[red]❌ {e}[/red]")
        ctx.exit(1)

    if json_output:
        click.echo(serialize_artifact(report.artifact), nl=False)
        return

    print_rich_table(console, create_artifact_table(report.artifact, report.states))
    if report.succeeded:
        console.print(f"✅ Saved to [bold green]{report.artifact_path}[/bold green]")
    else:
        console.print(f"[yellow]⚠️ No price extracted, recorded provenance in {report.artifact_path}[/yellow]")


@click.command()
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Artifact path (defaults to config)")
@click.pass_context
async def show(ctx, output: Path | None):
    """
    📄 Show the most recent artifact.
    """
    path = output or get_config().artifact_path
    try:
        artifact = read_artifact(path)
    except PersistenceError as e:
        console.print(f"[red]❌ {e}[/red]")
        ctx.exit(1)

    if ctx.obj["json_output"]:
        click.echo(serialize_artifact(artifact), nl=False)
    else:
        print_rich_table(console, create_artifact_table(artifact))


@click.command(name="gas-price")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Artifact path (defaults to config)")
@click.pass_context
async def gas_price(ctx, output: Path | None):
    """
    🔌 Print the /api/gas_price response body for the most recent artifact.
    """
    path = output or get_config().artifact_path
    try:
        artifact = read_artifact(path)
    except PersistenceError as e:
        console.print(f"[red]❌ {e}[/red]")
        ctx.exit(1)

    click.echo(json.dumps(gas_price_payload(artifact)))


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    config = get_config()
    mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

    # Use config defaults when CLI parameters are not provided
    final_log_level = log_level or config.log_level
    final_log_file = log_file or (str(config.log_file) if config.log_file else None)

    configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output structured JSON logs instead of rich interface")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    ⛽ Fuel Price Ingest - regional gas price scraper

    Pulls a client-rendered fuel price off the source page, by browser DOM
    scrape or schema-guided AI extraction, and records it with provenance
    in a single JSON artifact.
    """
    # Store global options in context for commands to access
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    # Initialize logging once here instead of in each command
    _initialize_logging(json, log_level, log_file)

    # Show help if no command provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Add commands to the main group
app.add_command(run)
app.add_command(show)
app.add_command(gas_price)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
