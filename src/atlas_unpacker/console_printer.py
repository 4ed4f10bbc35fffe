"""Rich console output for atlas regions and export results."""

from rich.console import Console
from rich.table import Table

from .descriptor import RegionRecord
from .export_pipeline import ExportReport


def _format_number(value: float) -> str:
    return f"{value:g}"


class RegionConsolePrinter:
    """Prints region tables and export summaries."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def display_regions(self, regions: list[RegionRecord]) -> None:
        """Show every parsed region with its rectangle and optional frame."""
        table = Table(title=f"Atlas regions ({len(regions)})")
        table.add_column("Name", style="cyan")
        table.add_column("Rectangle", justify="right")
        table.add_column("Frame", justify="right")

        for region in regions:
            rect = region.rectangle
            rect_text = (
                f"{_format_number(rect.x)},{_format_number(rect.y)} "
                f"{_format_number(rect.width)}x{_format_number(rect.height)}"
            )
            frame_text = "-"
            if region.frame is not None:
                frame = region.frame
                frame_text = (
                    f"{_format_number(frame.x)},{_format_number(frame.y)} "
                    f"{_format_number(frame.width)}x{_format_number(frame.height)}"
                )
            table.add_row(region.name, rect_text, frame_text)

        self.console.print(table)

    def display_report(self, report: ExportReport) -> None:
        """Show how many regions were exported and why the others failed."""
        self.console.print(
            f"\n[bold]Exported {len(report.exported)} of {report.total} regions[/bold]"
        )
        for failure in report.failed:
            self.console.print(f"  [yellow]![/yellow] {failure.region_name}: {failure.reason}")
