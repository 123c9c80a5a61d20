"""Concurrent, cancellable drawing of matched candidates onto the canvas."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from enum import Enum

from photomosaic.blending import BlendMode
from photomosaic.colour import Colour
from photomosaic.errors import MosaicConfigurationError
from photomosaic.matcher import min_difference_index, require_candidates
from photomosaic.partition import resolve_workers, run_striped, stripe_bounds
from photomosaic.picture import Canvas, Picture

logger = logging.getLogger(__name__)


class CompositeStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _draw_stripe(
    canvas: Canvas,
    lower: int,
    upper: int,
    quadrants: Sequence[Colour],
    candidates: Sequence[Picture],
    averages: Sequence[Colour],
    tile_size: int,
    blend_mode: BlendMode,
    cancel_event: threading.Event | None,
) -> bool:
    """Draw tile rows ``[lower, upper)``; False if cancelled before finishing."""
    width = canvas.width
    tiles_per_row = -(-width // tile_size)

    for j in range(lower, upper, tile_size):
        if cancel_event is not None and cancel_event.is_set():
            logger.debug("Stripe [%d, %d) cancelled at row %d", lower, upper, j)
            return False
        row_offset = j // tile_size * tiles_per_row
        for i in range(0, width, tile_size):
            position = row_offset + i // tile_size
            if position >= len(quadrants):
                msg = (
                    f"Tile ({i}, {j}) maps to quadrant {position} but only "
                    f"{len(quadrants)} quadrants were computed"
                )
                raise MosaicConfigurationError(msg)
            best = min_difference_index(averages, quadrants[position])
            canvas.draw_tile(candidates[best], i, j, tile_size, tile_size, blend_mode)
    return True


def composite(
    canvas: Canvas,
    quadrants: Sequence[Colour],
    candidates: Sequence[Picture],
    averages: Sequence[Colour],
    tile_size: int,
    blend_mode: BlendMode,
    workers: int | None = None,
    cancel_event: threading.Event | None = None,
) -> CompositeStatus:
    """Fill every *tile_size* square of *canvas* with its best candidate.

    Quadrant ``k`` (row-major) decides tile ``k``.  Rows are split into
    tile-aligned stripes, one per worker, and each worker only ever writes
    inside its own stripe.  Workers check *cancel_event* before each tile
    row; rows already drawn are kept when cancelled.

    Returns:
        ``CANCELLED`` if any stripe stopped early, otherwise ``COMPLETED``.
    """
    require_candidates(candidates)
    if len(averages) != len(candidates):
        msg = (
            f"{len(averages)} candidate averages for {len(candidates)} candidates"
        )
        raise MosaicConfigurationError(msg)
    if tile_size < 1:
        msg = f"tile size must be >= 1, got {tile_size}"
        raise MosaicConfigurationError(msg)
    if not quadrants:
        logger.info("No quadrants to draw")
        return CompositeStatus.COMPLETED

    n_workers = resolve_workers(workers)
    bounds = stripe_bounds(canvas.height, n_workers, tile_size)

    logger.info(
        "Compositing %dx%d canvas with %dpx tiles (%s, %d workers) …",
        canvas.width, canvas.height, tile_size, blend_mode.value, n_workers,
    )
    t0 = time.perf_counter()
    finished = run_striped(
        lambda lower, upper: _draw_stripe(
            canvas, lower, upper, quadrants, candidates, averages,
            tile_size, blend_mode, cancel_event,
        ),
        bounds,
    )
    status = CompositeStatus.COMPLETED if all(finished) else CompositeStatus.CANCELLED
    logger.info("Compositing %s  (%.2f s)", status.value, time.perf_counter() - t0)
    return status
