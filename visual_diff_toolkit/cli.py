"""
Command-line interface for the Visual Diff Toolkit
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from visual_diff_toolkit import __version__
from visual_diff_toolkit.core.config import get_settings
from visual_diff_toolkit.core.exceptions import ToolkitError
from visual_diff_toolkit.visual_testing import (
    ComparisonMethod,
    CoordinateMapper,
    DiffEngine,
    DisplayRect,
    IgnoreRegion,
)
from visual_diff_toolkit.visual_testing.imaging import load_raster, reconcile_dimensions, save_raster

console = Console()

EXIT_FAILED = 1
EXIT_ERROR = 2


def parse_region(value: str) -> IgnoreRegion:
    """Parse 'x,y,width,height'"""
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 4:
        raise click.BadParameter(f"expected x,y,width,height, got {value!r}")
    try:
        x, y, width, height = (int(p) for p in parts)
    except ValueError:
        raise click.BadParameter(f"region values must be integers: {value!r}")
    return IgnoreRegion(x=x, y=y, width=width, height=height)


def parse_size(value: str) -> tuple[float, float]:
    """Parse 'WIDTHxHEIGHT'"""
    try:
        width, height = (float(p) for p in value.lower().split("x"))
    except ValueError:
        raise click.BadParameter(f"expected WIDTHxHEIGHT, got {value!r}")
    return width, height


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Visual Diff Toolkit - pixel-level visual regression checks"""
    pass


@main.command()
@click.argument("baseline", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("candidate", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--method",
    "-m",
    type=click.Choice([m.value for m in ComparisonMethod], case_sensitive=False),
    default=None,
    help="Comparison method (default: from settings)",
)
@click.option("--threshold", "-t", type=float, default=None, help="Max diff percentage that passes")
@click.option("--ignore", "-i", "ignores", multiple=True, help="Ignore region x,y,width,height (repeatable)")
@click.option("--pad", is_flag=True, help="Pad mismatched images to a common size instead of failing")
@click.option("--diff-output", type=click.Path(dir_okay=False, path_type=Path), help="Write diff PNG here")
@click.option("--report-output", type=click.Path(dir_okay=False, path_type=Path), help="Write JSON report here")
@click.option("--workers", type=int, default=None, help="Worker threads (default: from settings)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def compare(
    baseline: Path,
    candidate: Path,
    method: str | None,
    threshold: float | None,
    ignores: tuple[str, ...],
    pad: bool,
    diff_output: Path | None,
    report_output: Path | None,
    workers: int | None,
    verbose: bool,
) -> None:
    """Compare CANDIDATE against BASELINE"""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        regions = [parse_region(value) for value in ignores]
        base_img = load_raster(baseline)
        cand_img = load_raster(candidate)
        if pad:
            base_img, cand_img = reconcile_dimensions(base_img, cand_img)

        engine = DiffEngine(settings=settings, max_workers=workers)
        outcome = engine.compare(base_img, cand_img, regions, method=method, threshold=threshold)
    except ToolkitError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(EXIT_ERROR)

    report = outcome.to_report()

    table = Table(show_header=False, box=None)
    table.add_row("Method", report.method)
    table.add_row("Size", f"{report.width}x{report.height}")
    table.add_row("Differing pixels", f"{report.differing_pixels} / {report.total_pixels}")
    table.add_row("Diff", f"{report.diff_percentage:.4f}%")
    table.add_row("Threshold", f"{report.threshold}%")
    table.add_row("Ignored regions", str(report.ignored_regions_count))

    status = "[bold green]PASSED[/bold green]" if report.is_passed else "[bold red]FAILED[/bold red]"
    console.print(Panel.fit(table, title=status, border_style="green" if report.is_passed else "red"))

    if diff_output:
        save_raster(outcome.diff_image, diff_output)
        console.print(f"Diff image: [green]{diff_output}[/green]")
    if report_output:
        report_output.parent.mkdir(parents=True, exist_ok=True)
        report_output.write_text(report.to_json(), encoding="utf-8")
        console.print(f"Report: [green]{report_output}[/green]")

    if not report.is_passed:
        sys.exit(EXIT_FAILED)


@main.command("map-region")
@click.option("--display", "display_size", required=True, help="Rendered size WIDTHxHEIGHT")
@click.option("--intrinsic", "intrinsic_size", required=True, help="Image size WIDTHxHEIGHT")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.argument("width", type=float)
@click.argument("height", type=float)
def map_region(
    display_size: str,
    intrinsic_size: str,
    x: float,
    y: float,
    width: float,
    height: float,
) -> None:
    """Map a rectangle drawn at display size onto intrinsic pixels"""
    display_w, display_h = parse_size(display_size)
    intrinsic_w, intrinsic_h = parse_size(intrinsic_size)

    try:
        mapper = CoordinateMapper(display_w, display_h, int(intrinsic_w), int(intrinsic_h))
        left, top = mapper.clamp(x, y)
        right, bottom = mapper.clamp(x + width, y + height)
        region = mapper.map_rect(DisplayRect(left, top, right - left, bottom - top))
    except ToolkitError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(EXIT_ERROR)

    if region is None:
        console.print("[yellow]Rectangle smaller than 5 display pixels - discarded[/yellow]")
        return
    console.print(f"{region.x},{region.y},{region.width},{region.height}")


if __name__ == "__main__":
    main()
