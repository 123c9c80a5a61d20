"""Concurrent per-tile average colours of the source picture."""

from __future__ import annotations

import logging
import time

from photomosaic.colour import Colour, Coordinate, average_colour
from photomosaic.errors import MosaicConfigurationError
from photomosaic.partition import resolve_workers, run_striped, stripe_bounds
from photomosaic.picture import Picture

logger = logging.getLogger(__name__)


def expected_quadrant_count(width: int, height: int, tile_step: int) -> int:
    """``ceil(width / tile_step) * ceil(height / tile_step)``."""
    return -(-width // tile_step) * -(-height // tile_step)


def _stripe_quadrants(
    picture: Picture,
    lower: int,
    upper: int,
    tile_step: int,
    sampling_step: int,
) -> list[Colour]:
    width = picture.width
    averages: list[Colour] = []
    for j in range(lower, upper, tile_step):
        bottom = min(j + tile_step - 1, upper - 1)
        for i in range(0, width, tile_step):
            right = min(i + tile_step - 1, width - 1)
            averages.append(
                average_colour(
                    Coordinate(i, j), Coordinate(right, bottom), picture, sampling_step,
                )
            )
    return averages


def compute_quadrants(
    picture: Picture,
    tile_step: int,
    sampling_step: int = 1,
    workers: int | None = None,
) -> list[Colour]:
    """Average colour of every *tile_step* square of *picture*.

    The picture is cut into horizontal, tile-aligned stripes, one per
    worker; each stripe is averaged exactly once and the stripe results
    are concatenated top to bottom, so the output is in row-major tile
    order whatever the worker count.  Tiles on the right and bottom edges
    may be partial.

    Returns:
        One :class:`Colour` per tile, length
        ``ceil(W / tile_step) * ceil(H / tile_step)``.
    """
    if tile_step < 1:
        msg = f"tile step must be >= 1, got {tile_step}"
        raise MosaicConfigurationError(msg)

    n_workers = resolve_workers(workers)
    bounds = stripe_bounds(picture.height, n_workers, tile_step)

    logger.info(
        "Averaging %dx%d picture in %dpx quadrants (%d workers, step %d) …",
        picture.width, picture.height, tile_step, n_workers, sampling_step,
    )
    t0 = time.perf_counter()
    stripes = run_striped(
        lambda lower, upper: _stripe_quadrants(
            picture, lower, upper, tile_step, sampling_step,
        ),
        bounds,
    )
    quadrants = [colour for stripe in stripes for colour in stripe]
    logger.info(
        "%d quadrants ready  (%.2f s)", len(quadrants), time.perf_counter() - t0,
    )
    return quadrants
