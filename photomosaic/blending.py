"""Blend modes used to composite candidate tiles onto the canvas."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from photomosaic.errors import MosaicConfigurationError

if TYPE_CHECKING:
    from photomosaic.colour import Colour

logger = logging.getLogger(__name__)

# Mean brightness at or above which the darker "multiply" blend is used.
BRIGHTNESS_THRESHOLD = 128


class BlendMode(str, Enum):
    MULTIPLY = "multiply"
    OVERLAY = "overlay"


def blend(source: np.ndarray, destination: np.ndarray, mode: BlendMode) -> np.ndarray:
    """Composite opaque *source* over *destination*.

    Args:
        source:      (H, W, 3) uint8 - the candidate tile.
        destination: (H, W, 3) uint8 - what is already on the canvas.
        mode:        How the two are combined.

    Returns:
        (H, W, 3) uint8 - the blended pixels, rounded to nearest.
    """
    s = source.astype(np.int32)
    d = destination.astype(np.int32)

    if mode is BlendMode.MULTIPLY:
        out = (s * d + 127) // 255
    elif mode is BlendMode.OVERLAY:
        low = (2 * s * d + 127) // 255
        high = 255 - (2 * (255 - s) * (255 - d) + 127) // 255
        out = np.where(2 * d <= 255, low, high)
    else:
        msg = f"Unknown blend mode: {mode!r}"
        raise ValueError(msg)

    return np.clip(out, 0, 255).astype(np.uint8)


def select_blend_mode(quadrants: Sequence[Colour]) -> BlendMode:
    """Pick the blend mode for a whole run from its overall brightness.

    The per-channel means over all quadrants are truncated to integers,
    then averaged again.  Bright images (>= 128) get ``MULTIPLY``, dark
    ones ``OVERLAY``.
    """
    n = len(quadrants)
    if n == 0:
        msg = "Cannot select a blend mode without any quadrants"
        raise MosaicConfigurationError(msg)

    red = sum(q.red for q in quadrants) // n
    green = sum(q.green for q in quadrants) // n
    blue = sum(q.blue for q in quadrants) // n
    brightness = (red + green + blue) // 3

    mode = BlendMode.MULTIPLY if brightness >= BRIGHTNESS_THRESHOLD else BlendMode.OVERLAY
    logger.info("Mean brightness %d -> %s blending", brightness, mode.value)
    return mode
