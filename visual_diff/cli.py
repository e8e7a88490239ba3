"""CLI entry point for the visual diff tool."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from PIL import Image
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from visual_diff.models.config import DiffConfig
from visual_diff.orchestrator import Orchestrator

console = Console()

EXIT_PASSED = 0
EXIT_FAILED = 1
EXIT_ERROR = 2


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config: Optional[str]) -> DiffConfig:
    if config is None:
        return DiffConfig()
    return DiffConfig.load(config)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Compare two directories of screenshots and report visual differences."""
    setup_logging(verbose)


@cli.command()
@click.argument("baseline_dir", type=click.Path(file_okay=False))
@click.argument("candidate_dir", type=click.Path(file_okay=False))
@click.option("--output", "-o", default=None, help="Output directory for reports")
@click.option("--config", "-c", default=None, help="Config file path")
@click.option("--threshold", type=click.IntRange(0, 255), default=None,
              help="Per-channel tolerance before a pixel counts as different")
@click.option("--max-files-shown", type=click.IntRange(min=1), default=None,
              help="Entries listed per Markdown section")
@click.option("--workers", type=click.IntRange(min=1), default=None,
              help="Parallel comparison workers (default: CPU count)")
def compare(
    baseline_dir: str,
    candidate_dir: str,
    output: Optional[str],
    config: Optional[str],
    threshold: Optional[int],
    max_files_shown: Optional[int],
    workers: Optional[int],
) -> None:
    """Compare CANDIDATE_DIR against BASELINE_DIR. Exits 1 when the run fails."""
    try:
        cfg = _load_config(config)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config}[/red]")
        console.print("Run 'visual-diff init' to create a default config.")
        sys.exit(EXIT_ERROR)
    except ValidationError as e:
        console.print(f"[red]Invalid config {config}:[/red] {e}")
        sys.exit(EXIT_ERROR)
    except ValueError as e:
        console.print(f"[red]Could not read config {config}:[/red] {e}")
        sys.exit(EXIT_ERROR)

    overrides = {}
    if threshold is not None:
        overrides["pixel_threshold"] = threshold
    if max_files_shown is not None:
        overrides["max_files_shown"] = max_files_shown
    if workers is not None:
        overrides["max_workers"] = workers
    if output is not None:
        overrides["output_dir"] = output
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    orchestrator = Orchestrator(cfg)
    try:
        results = orchestrator.run(baseline_dir, candidate_dir)
    except (OSError, Image.DecompressionBombError) as e:
        console.print(f"[red]Comparison aborted:[/red] {e}")
        sys.exit(EXIT_ERROR)

    passed = results["passed"]
    status = "[bold green]PASSED[/bold green]" if passed else "[bold red]FAILED[/bold red]"
    console.print(f"\nVisual Diff {status}")
    table = Table(title="Results Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Duration", f"{results['duration']}s")
    table.add_row("Total Images", str(results["results"]["total"]))
    table.add_row("Different", f"[red]{results['results']['different']}[/red]")
    table.add_row("Removed", f"[yellow]{results['results']['removed']}[/yellow]")
    table.add_row("Added", f"[blue]{results['results']['added']}[/blue]")
    table.add_row("Identical", f"[green]{results['results']['identical']}[/green]")
    console.print(table)

    for fmt, path in results["reports"].items():
        console.print(f"  {fmt.upper()} report: [blue]{path}[/blue]")

    sys.exit(EXIT_PASSED if passed else EXIT_FAILED)


@cli.command()
@click.option("--config", "-c", default="visual-diff.json", help="Config file path")
def init(config: str) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    DiffConfig().save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nYou can now customize this file and run:")
    console.print(f"  [blue]visual-diff compare BASELINE_DIR CANDIDATE_DIR -c {config_path}[/blue]")


if __name__ == "__main__":
    cli()
