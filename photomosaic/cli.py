"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import contextlib
import logging
import signal
import threading
import time
from collections.abc import Iterator
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from photomosaic.config import MosaicSettings
from photomosaic.errors import MosaicConfigurationError
from photomosaic.image_io import (
    collect_images,
    load_candidates,
    load_picture,
    make_comparison_grid,
    preview,
    save_picture,
)
from photomosaic.process import MosaicProcess, MosaicResult

app = typer.Typer(
    name="photo-mosaic",
    help="Rebuild any image as a photomosaic of candidate pictures.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


@contextlib.contextmanager
def _cancel_on_interrupt(cancel_event: threading.Event) -> Iterator[None]:
    """Turn Ctrl-C into a cooperative cancellation request."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum, frame) -> None:
        console.print("[yellow]Interrupt received, finishing current rows …[/yellow]")
        cancel_event.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _build_mosaic(
    source_path: Path,
    settings: MosaicSettings,
    cancel_event: threading.Event,
) -> MosaicResult:
    source = load_picture(source_path)
    process = MosaicProcess(settings, source)
    logging.getLogger("photomosaic").info(
        "Source: %dx%d -> canvas %dx%d, tile %dpx",
        process.old_width, process.old_height,
        process.new_width, process.new_height, process.tile_size,
    )
    candidates = load_candidates(
        settings.candidates_dir, process.tile_size, settings.SUPPORTED_EXTENSIONS,
    )
    with _cancel_on_interrupt(cancel_event):
        return process.run(candidates, cancel_event)


def _report(result: MosaicResult, path: Path, elapsed: float) -> None:
    mark = "[yellow]![/yellow]" if result.cancelled else "[green]✓[/green]"
    note = "  [yellow]partial (cancelled)[/yellow]" if result.cancelled else ""
    console.print(
        f"  {mark} {path.name}  "
        f"[dim]{result.mosaic.width}x{result.mosaic.height}  "
        f"tile={result.tile_size}px  tiles={result.quadrant_count}  "
        f"blend={result.blend_mode.value}  time={elapsed:.1f}s[/dim]{note}"
    )


# Defaults come from MosaicSettings - single source of truth
_DEFAULTS = MosaicSettings()


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    candidates_dir: Path = typer.Option(
        _DEFAULTS.candidates_dir, "--candidates", "-c",
        help="Folder with candidate tile pictures",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    scalar: int = typer.Option(
        _DEFAULTS.scalar, "--scalar", help="Integer upscale factor for the canvas",
    ),
    power_index: int = typer.Option(
        _DEFAULTS.power_index, "--power-index", "-p",
        help="Tile granularity (larger = smaller, more tiles)",
    ),
    step: int = typer.Option(
        _DEFAULTS.quadrant_sampling_step, "--step",
        help="Sampling stride for average colours (1 = every pixel)",
    ),
    workers: int | None = typer.Option(
        _DEFAULTS.workers, "--workers", "-w", help="Concurrent stripes (default: CPUs)",
    ),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Save an Original | Mosaic comparison grid",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Process all images in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)

    try:
        cfg = MosaicSettings(
            scalar=scalar,
            power_index=power_index,
            quadrant_sampling_step=step,
            workers=workers,
            save_comparison=comparison,
            input_dir=input_dir,
            candidates_dir=candidates_dir,
            output_dir=output_dir,
        )
    except MosaicConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(exist_ok=True)

    images = collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]PHOTO MOSAIC GENERATOR[/bold]\n"
        f"Scalar: {cfg.scalar}  |  Power index: {cfg.power_index}\n"
        f"Sampling step: {cfg.quadrant_sampling_step}  |  "
        f"Workers: {cfg.workers or 'auto'}\n"
        f"Candidates: {cfg.candidates_dir}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    cancel_event = threading.Event()
    for idx, img_path in enumerate(images, 1):
        if cancel_event.is_set():
            console.print("[yellow]Cancelled - skipping remaining images[/yellow]")
            break

        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t_total = time.perf_counter()

        try:
            result = _build_mosaic(img_path, cfg, cancel_event)
        except MosaicConfigurationError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(1) from exc

        mosaic_path = output_dir / f"{img_path.stem}_mosaic.{cfg.output_format}"
        save_picture(result.mosaic, mosaic_path)

        if cfg.save_comparison:
            comp_path = output_dir / f"{img_path.stem}_comparison.{cfg.output_format}"
            make_comparison_grid(load_picture(img_path), result.mosaic, comp_path)

        _report(result, mosaic_path, time.perf_counter() - t_total)

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


# -- single-image command ----------------------------------------------

@app.command()
def single(
    source: Path = typer.Argument(..., help="Path to the source image"),
    candidates_dir: Path = typer.Option(
        _DEFAULTS.candidates_dir, "--candidates", "-c",
    ),
    output: Path = typer.Option(Path("output/mosaic.png"), "--output", "-o"),
    scalar: int = typer.Option(_DEFAULTS.scalar, "--scalar"),
    power_index: int = typer.Option(_DEFAULTS.power_index, "--power-index", "-p"),
    step: int = typer.Option(_DEFAULTS.quadrant_sampling_step, "--step"),
    workers: int | None = typer.Option(_DEFAULTS.workers, "--workers", "-w"),
    preview_path: Path | None = typer.Option(
        None, "--preview", help="Also save a preview scaled to the preview width",
    ),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Save an Original | Mosaic grid next to OUTPUT",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Process a single image."""
    _setup_logging(verbose)

    output.parent.mkdir(parents=True, exist_ok=True)
    t_total = time.perf_counter()

    try:
        cfg = MosaicSettings(
            scalar=scalar,
            power_index=power_index,
            quadrant_sampling_step=step,
            workers=workers,
            candidates_dir=candidates_dir,
            save_comparison=comparison,
        )
        result = _build_mosaic(source, cfg, threading.Event())
    except MosaicConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    save_picture(result.mosaic, output)
    if preview_path is not None:
        save_picture(preview(result.mosaic, cfg.preview_width), preview_path)
    if cfg.save_comparison:
        comp_path = output.with_name(f"{output.stem}_comparison{output.suffix}")
        make_comparison_grid(load_picture(source), result.mosaic, comp_path)

    _report(result, output, time.perf_counter() - t_total)


if __name__ == "__main__":
    app()
