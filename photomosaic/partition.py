"""Tile-aligned row striping and a structured parallel-for over stripes."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from photomosaic.errors import MosaicConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def default_workers() -> int:
    """One worker per available CPU."""
    return max(1, os.cpu_count() or 1)


def resolve_workers(workers: int | None) -> int:
    """Worker count to use, never more than the available CPUs."""
    if workers is None:
        return default_workers()
    if workers < 1:
        msg = f"workers must be >= 1, got {workers}"
        raise MosaicConfigurationError(msg)
    return min(workers, default_workers())


def stripe_bounds(height: int, workers: int, tile: int) -> list[int]:
    """Split ``[0, height)`` into *workers* contiguous, tile-aligned stripes.

    Boundary ``i`` is ``(height // workers) * i`` snapped down to a multiple
    of *tile*, so no stripe ever splits a tile row; the final boundary is
    *height* itself.  Stripes may be empty when the image is short.

    Returns:
        ``workers + 1`` non-decreasing boundaries; stripe ``k`` covers
        ``[bounds[k], bounds[k + 1])``.
    """
    if tile < 1:
        msg = f"tile size must be >= 1, got {tile}"
        raise MosaicConfigurationError(msg)
    workers = max(1, workers)
    band = height // workers
    bounds = [band * i // tile * tile for i in range(workers)]
    bounds.append(height)
    return bounds


def run_striped(task: Callable[[int, int], T], bounds: Sequence[int]) -> list[T]:
    """Run ``task(lower, upper)`` for every stripe and wait for all of them.

    Every stripe but the last is handed to a thread pool; the last runs on
    the calling thread, so exactly ``len(bounds) - 1`` stripes execute at
    once.  Results come back in stripe order.  If any stripe raises, the
    call still waits for the others and then re-raises the earliest
    failure (in stripe order).
    """
    stripes = list(zip(bounds[:-1], bounds[1:], strict=True))
    if not stripes:
        return []
    if len(stripes) == 1:
        lower, upper = stripes[0]
        return [task(lower, upper)]

    logger.debug("Running %d stripes: %s", len(stripes), stripes)
    with ThreadPoolExecutor(
        max_workers=len(stripes) - 1, thread_name_prefix="mosaic-stripe",
    ) as ex:
        futures = [ex.submit(task, lower, upper) for lower, upper in stripes[:-1]]
        last_error: Exception | None = None
        try:
            last = task(*stripes[-1])
        except Exception as exc:
            last_error = exc
        results = [f.result() for f in futures]
    if last_error is not None:
        raise last_error
    results.append(last)
    return results
