"""
Command-line interface for cocomerge using Typer.
"""

import traceback
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.markup import escape

from .. import __version__
from ..config import load_merge_config
from ..data.loader import load_coco_file
from ..exceptions import CocoMergeError
from ..logging_config import setup_logging
from ..stats import DatasetStats
from ..validators import COCOValidator
from .merge_logic import _merge_datasets_core
from .utils import console, display_stats, display_validation

app = typer.Typer(
    name="cocomerge",
    help="cocomerge - Merge and inspect COCO datasets",
    add_completion=False,
    rich_markup_mode="rich",
)


def raise_exit():
    """Raise typer exit."""
    raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=lambda value: (
            print(f"cocomerge version: {__version__}") or raise_exit()
        )
        if value
        else None,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """cocomerge - Merge and inspect COCO datasets"""
    pass


@app.command()
def merge(
    coco_files: Optional[List[Path]] = typer.Argument(
        None, help="COCO JSON file paths to merge, in priority order"
    ),
    output_path: Optional[Path] = typer.Option(
        None, "--output-path", "-o", help="JSON output path (default: merged.json)"
    ),
    reassign_clashing_ids: Optional[bool] = typer.Option(
        None,
        "--reassign-clashing-ids",
        "-r",
        help="Reassign clashing image ids instead of ignoring the clashing images",
    ),
    version_string: Optional[str] = typer.Option(
        None,
        "--version-string",
        "-v",
        help="Version string for the COCO info section (default: 1.0.0)",
    ),
    absolute_paths: Optional[bool] = typer.Option(
        None,
        "--absolute-paths",
        "-a",
        help="Force absolute paths for image file names in the merged output",
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to YAML config file"
    ),
    log_file: Optional[str] = typer.Option(
        None, "--log-file", help="Also write logs to this file"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
):
    """Merge COCO files into one dataset without id collisions."""
    setup_logging(log_file=log_file, verbose=verbose)

    if config_file and coco_files:
        typer.echo(
            "[ERROR] If --config is provided, pass the input files in the config file.",
            err=True,
        )
        raise typer.Exit(1)
    if not config_file and not coco_files:
        typer.echo("[ERROR] Missing required arguments: coco_files", err=True)
        raise typer.Exit(1)

    overrides = {
        "coco_files": [str(p) for p in coco_files] if coco_files else None,
        "output_path": str(output_path) if output_path is not None else None,
        "reassign_clashing_ids": reassign_clashing_ids,
        "version_string": version_string,
        "absolute_paths": absolute_paths,
    }
    try:
        config = load_merge_config(config_file, overrides)
    except ValidationError as e:
        typer.echo("[ERROR] Configuration validation error:", err=True)
        for error in e.errors():
            location = error["loc"][0] if error["loc"] else "config"
            typer.echo(f"   {location}: {error['msg']}", err=True)
        raise typer.Exit(1)
    except Exception:
        typer.echo(
            f"[ERROR] Failed to load config file: {traceback.format_exc()}", err=True
        )
        raise typer.Exit(1)

    try:
        _merge_datasets_core(config)
    except CocoMergeError as e:
        console.print(f"[red]Merge failed: {escape(e.message)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Merged dataset written to {config.output_path}[/green]")


@app.command()
def count(
    coco_file: Path = typer.Argument(..., help="COCO JSON file path"),
):
    """Show image, annotation and category counts for a COCO file."""
    try:
        dataset = load_coco_file(coco_file)
    except CocoMergeError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)

    display_stats(coco_file.name, DatasetStats.from_coco_file(dataset))


@app.command()
def validate(
    coco_file: Path = typer.Argument(..., help="COCO JSON file path"),
):
    """Check id uniqueness and references of a COCO file."""
    try:
        dataset = load_coco_file(coco_file)
    except CocoMergeError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)

    validator = COCOValidator(dataset, source_path=str(coco_file))
    summary = validator.get_summary()
    display_validation(summary, validator.errors, validator.warnings)
    if not summary["is_valid"]:
        raise typer.Exit(1)
