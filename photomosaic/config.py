"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from photomosaic.errors import MosaicConfigurationError


@dataclass(frozen=True)
class MosaicSettings:
    """All tuneable parameters for a mosaic run.

    Attributes:
        scalar:                 Integer upscale factor for the canvas and tile size.
        power_index:            Tile granularity; larger index -> smaller, more tiles.
        quadrant_sampling_step: Sampling stride for every average colour (1 = every pixel).
        workers:                Concurrent stripes per phase (None = one per CPU;
                                larger values are capped at the CPU count).
        preview_width:          Width of the aspect-preserving preview image.
        input_dir:              Folder to scan for source images (batch mode).
        candidates_dir:         Folder holding the candidate tile pictures.
        output_dir:             Folder for results.
        output_format:          Image format for saved files.
        save_comparison:        Generate a side-by-side Original | Mosaic grid.
    """

    # Geometry
    scalar: int = 1
    power_index: int = 32

    # Averaging
    quadrant_sampling_step: int = 1

    # Concurrency
    workers: int | None = None

    # Output
    preview_width: int = 1500
    output_format: str = "png"
    save_comparison: bool = True

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    candidates_dir: Path = field(default_factory=lambda: Path("candidates"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif"}
    )

    def __post_init__(self) -> None:
        for name in ("scalar", "power_index", "quadrant_sampling_step", "preview_width"):
            value = getattr(self, name)
            if value < 1:
                msg = f"{name} must be >= 1, got {value}"
                raise MosaicConfigurationError(msg)
        if self.workers is not None and self.workers < 1:
            msg = f"workers must be >= 1 or None, got {self.workers}"
            raise MosaicConfigurationError(msg)
