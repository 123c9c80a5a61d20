"""Pixel buffers: a read-only :class:`Picture` and a drawable :class:`Canvas`."""

from __future__ import annotations

import numpy as np
from PIL import Image

from photomosaic.blending import BlendMode, blend
from photomosaic.colour import Colour


class Picture:
    """Read-only RGB image backed by an ``(H, W, 3)`` uint8 array."""

    def __init__(self, pixels: np.ndarray) -> None:
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            msg = f"expected an (H, W, 3) array, got shape {pixels.shape}"
            raise ValueError(msg)
        arr = np.array(pixels, dtype=np.uint8, copy=True)
        arr.flags.writeable = False
        self._pixels = arr

    @classmethod
    def from_image(cls, img: Image.Image) -> Picture:
        return cls(np.asarray(img.convert("RGB"), dtype=np.uint8))

    @classmethod
    def filled(cls, width: int, height: int, colour: Colour) -> Picture:
        """A *width* x *height* picture of one solid colour."""
        arr = np.empty((height, width, 3), dtype=np.uint8)
        arr[:, :] = colour
        return cls(arr)

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def pixel_at(self, x: int, y: int) -> Colour:
        if not (0 <= x < self.width and 0 <= y < self.height):
            msg = f"pixel ({x}, {y}) outside {self.width}x{self.height} picture"
            raise IndexError(msg)
        r, g, b = self._pixels[y, x]
        return Colour(int(r), int(g), int(b))

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._pixels)

    def __repr__(self) -> str:
        return f"Picture({self.width}x{self.height})"


class Canvas:
    """Mutable destination image the compositor draws tiles onto.

    Workers may call :meth:`draw_tile` concurrently as long as their
    rectangles never share a row.
    """

    def __init__(self, base: Picture) -> None:
        self._pixels = np.array(base.pixels, dtype=np.uint8, copy=True)

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def draw_tile(
        self,
        candidate: Picture,
        x: int,
        y: int,
        width: int,
        height: int,
        blend_mode: BlendMode,
    ) -> None:
        """Blend *candidate*, repeated to cover the rectangle, onto the canvas.

        The rectangle ``[x, x + width) x [y, y + height)`` is clipped to the
        canvas, so edge tiles may be drawn partially.
        """
        if x < 0 or y < 0:
            msg = f"tile origin ({x}, {y}) must not be negative"
            raise ValueError(msg)
        x1 = min(x + width, self.width)
        y1 = min(y + height, self.height)
        if x1 <= x or y1 <= y or candidate.width == 0 or candidate.height == 0:
            return

        h, w = y1 - y, x1 - x
        reps_y = -(-h // candidate.height)
        reps_x = -(-w // candidate.width)
        source = np.tile(candidate.pixels, (reps_y, reps_x, 1))[:h, :w]

        region = self._pixels[y:y1, x:x1]
        region[...] = blend(source, region, blend_mode)

    def to_picture(self) -> Picture:
        return Picture(self._pixels)

    def tobytes(self) -> bytes:
        return self._pixels.tobytes()
