"""
Rich output helpers for CLI commands.
"""

from typing import Any, Dict, List, Sequence

from rich.console import Console
from rich.table import Table

from ..core.merger import FileMergeReport
from ..stats import DatasetStats, kind_label

console = Console()


def display_merge_reports(reports: Sequence[FileMergeReport]):
    """Display per-file merge results."""
    table = Table(title="Merge Results")
    table.add_column("File", style="cyan")
    table.add_column("Images", style="green")
    table.add_column("Dropped", style="red")
    table.add_column("Annotations", style="green")
    table.add_column("Discarded", style="red")
    table.add_column("Categories", style="yellow")
    table.add_column("Licenses", style="yellow")

    for report in reports:
        table.add_row(
            report.source_path,
            f"{report.images_kept}/{report.images_in}",
            str(report.images_dropped),
            f"{report.annotations_kept}/{report.annotations_in}",
            str(report.annotations_discarded),
            str(report.categories_in),
            str(report.licenses_in),
        )
    console.print(table)


def display_stats(file_name: str, stats: DatasetStats):
    """Display dataset statistics for one COCO file."""
    table = Table(title=f"Coco File: {file_name}")
    table.add_column("Property", style="cyan")
    table.add_column("Count", style="green")

    table.add_row("Images", str(stats.images))
    table.add_row("Annotations", str(stats.annotations))
    for kind, count in stats.annotations_by_kind.items():
        table.add_row(f"  {kind_label(kind)} Annotations", str(count))
    table.add_row("Categories", str(stats.categories))
    for kind, count in stats.categories_by_kind.items():
        table.add_row(f"  {kind_label(kind)} Categories", str(count))
    table.add_row("Licenses", str(stats.licenses))
    console.print(table)


def display_validation(summary: Dict[str, Any], errors: List[str], warnings: List[str]):
    """Display validation results."""
    status = "[green]valid[/green]" if summary["is_valid"] else "[red]invalid[/red]"
    console.print(f"[bold]{summary['file_path']}[/bold]: {status}")
    for error in errors:
        console.print(f"  [red]error:[/red] {error}")
    for warning in warnings:
        console.print(f"  [yellow]warning:[/yellow] {warning}")
    console.print(
        f"{summary['image_count']} images, {summary['annotation_count']} annotations, "
        f"{summary['category_count']} categories, {summary['license_count']} licenses"
    )
