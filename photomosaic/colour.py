"""RGB colour values and region averaging."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from photomosaic.picture import Picture


class Colour(NamedTuple):
    """Immutable 8-bit RGB triple."""

    red: int
    green: int
    blue: int

    def distance(self, other: Colour) -> int:
        """Sum of absolute per-channel differences (L1)."""
        return (
            abs(self.red - other.red)
            + abs(self.green - other.green)
            + abs(self.blue - other.blue)
        )


class Coordinate(NamedTuple):
    """Integer pixel position; one corner of an inclusive rectangle."""

    x: int = 0
    y: int = 0


RED = Colour(255, 0, 0)
GREEN = Colour(0, 255, 0)
BLUE = Colour(0, 0, 255)
WHITE = Colour(255, 255, 255)
BLACK = Colour(0, 0, 0)


def _sample_axis(start: int, end: int, step: int) -> slice:
    # Samples start, start + step, ... while <= end - step + 1.
    stop = end - step + 2
    return slice(start, max(start, stop), step)


def average_colour(
    top_left: Coordinate,
    bottom_right: Coordinate,
    picture: Picture,
    step: int = 1,
) -> Colour:
    """Average colour of the pixels sampled between two corners.

    Every *step*-th pixel is read along both axes, so roughly
    ``N / step**2`` pixels of the ``N`` in the region contribute.  A bigger
    step is faster but slightly less accurate; ``step=1`` reads everything.

    Args:
        top_left:     Inclusive top-left corner.
        bottom_right: Inclusive bottom-right corner.
        picture:      Picture to sample.
        step:         Sampling stride (>= 1).

    Returns:
        The channel-wise mean, truncated to integers.  A region that
        samples no pixel at all (e.g. narrower than *step*) yields
        :data:`BLACK`.

    Raises:
        IndexError: if either corner lies outside *picture*.
    """
    if step < 1:
        msg = f"step must be >= 1, got {step}"
        raise ValueError(msg)
    if (
        top_left.x < 0
        or top_left.y < 0
        or bottom_right.x >= picture.width
        or bottom_right.y >= picture.height
    ):
        msg = (
            f"region {tuple(top_left)}-{tuple(bottom_right)} outside "
            f"{picture.width}x{picture.height} picture"
        )
        raise IndexError(msg)

    rows = _sample_axis(top_left.y, bottom_right.y, step)
    cols = _sample_axis(top_left.x, bottom_right.x, step)
    region = picture.pixels[rows, cols]

    count = region.shape[0] * region.shape[1]
    if count == 0:
        return BLACK

    totals = region.reshape(-1, 3).sum(axis=0, dtype=np.int64)
    red, green, blue = (int(t) // count for t in totals)
    return Colour(red, green, blue)
