"""Image loading, saving, previews and comparison-grid generation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from photomosaic.picture import Picture

logger = logging.getLogger(__name__)


def compute_preview_size(
    original_width: int,
    original_height: int,
    preferred_width: int,
) -> tuple[int, int]:
    """(w, h) with width *preferred_width* and the original aspect ratio.

    The height is truncated, minimum 1.
    """
    h = max(1, preferred_width * original_height // original_width)
    return preferred_width, h


def load_picture(path: str | Path) -> Picture:
    """Load any Pillow-readable image as an RGB :class:`Picture`."""
    with Image.open(path) as img:
        return Picture.from_image(img)


def resize_picture(
    picture: Picture,
    width: int,
    height: int,
    resample: Image.Resampling = Image.Resampling.NEAREST,
) -> Picture:
    """Return *picture* scaled to exactly *width* x *height*."""
    if (picture.width, picture.height) == (width, height):
        return picture
    return Picture.from_image(picture.to_image().resize((width, height), resample))


def collect_images(folder: Path, extensions: Iterable[str]) -> list[Path]:
    """Image files directly inside *folder*, sorted by name."""
    if not folder.exists():
        return []
    exts = frozenset(extensions)
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in exts
    )


def load_candidates(
    folder: str | Path,
    tile_size: int,
    extensions: Iterable[str],
) -> list[Picture]:
    """Load every image in *folder*, resized to *tile_size* square.

    Order is the sorted file-name order, so candidate indices are stable
    between runs.
    """
    paths = collect_images(Path(folder), extensions)
    candidates = []
    for path in paths:
        with Image.open(path) as img:
            resized = img.convert("RGB").resize((tile_size, tile_size), Image.LANCZOS)
        candidates.append(Picture.from_image(resized))
    logger.info("Loaded %d candidates from %s (%dpx)", len(candidates), folder, tile_size)
    return candidates


def preview(picture: Picture, preferred_width: int = 1500) -> Picture:
    """Aspect-preserving copy of *picture* at *preferred_width*."""
    w, h = compute_preview_size(picture.width, picture.height, preferred_width)
    return resize_picture(picture, w, h, Image.Resampling.LANCZOS)


def save_picture(picture: Picture, path: str | Path) -> None:
    picture.to_image().save(path)


def make_comparison_grid(
    original: Picture,
    mosaic: Picture,
    output_path: str | Path,
    panel_width: int = 600,
) -> None:
    """Create a 2-panel comparison: Original | Mosaic.

    Both panels share the same width and the original's aspect ratio.
    """
    panel_w, panel_h = compute_preview_size(original.width, original.height, panel_width)
    label_height = 36

    panels = [
        original.to_image().resize((panel_w, panel_h), Image.LANCZOS),
        mosaic.to_image().resize((panel_w, panel_h), Image.LANCZOS),
    ]
    labels = [
        f"Original {original.width}x{original.height}",
        f"Mosaic {mosaic.width}x{mosaic.height}",
    ]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
