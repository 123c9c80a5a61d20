"""Nearest-colour matching of quadrants against candidate pictures."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from photomosaic.colour import Colour, Coordinate, average_colour
from photomosaic.errors import MosaicConfigurationError
from photomosaic.picture import Picture

logger = logging.getLogger(__name__)


def require_candidates(candidates: Sequence[Picture]) -> None:
    """Fail fast when there is nothing to match against."""
    if not candidates:
        msg = "At least one candidate picture is required"
        raise MosaicConfigurationError(msg)


def candidate_averages(
    candidates: Sequence[Picture],
    sampling_step: int = 1,
) -> list[Colour]:
    """Average colour of each whole candidate, index-aligned with *candidates*."""
    averages = [
        average_colour(
            Coordinate(0, 0),
            Coordinate(p.width - 1, p.height - 1),
            p,
            sampling_step,
        )
        for p in candidates
    ]
    logger.debug("Candidate averages: %s", averages)
    return averages


def min_difference_index(averages: Sequence[Colour], colour: Colour) -> int:
    """Index of the candidate average closest to *colour*.

    Distance is the plain sum of absolute channel differences.  On a tie
    the earliest candidate wins.

    Returns:
        The index, or ``-1`` when *averages* is empty.
    """
    min_index = -1
    min_difference = None
    for index, candidate in enumerate(averages):
        difference = candidate.distance(colour)
        if min_difference is None or difference < min_difference:
            min_difference = difference
            min_index = index
    return min_index
