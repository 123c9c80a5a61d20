"""
Photo Mosaic Generator
======================

Rebuild a source image from a pool of small candidate pictures: every
tile of the source is replaced by the candidate whose average colour is
closest, blended onto the upscaled original.

Both heavy passes (tile averaging and compositing) run concurrently over
tile-aligned horizontal stripes; compositing is cooperatively cancellable.
"""

__version__ = "1.0.0"

from photomosaic.blending import BlendMode, blend, select_blend_mode
from photomosaic.colour import Colour, Coordinate, average_colour
from photomosaic.compositor import CompositeStatus, composite
from photomosaic.config import MosaicSettings
from photomosaic.errors import MosaicConfigurationError, MosaicError
from photomosaic.image_io import (
    load_candidates,
    load_picture,
    make_comparison_grid,
    preview,
    save_picture,
)
from photomosaic.matcher import candidate_averages, min_difference_index
from photomosaic.picture import Canvas, Picture
from photomosaic.process import MosaicProcess, MosaicResult, compute_tile_size
from photomosaic.quadrants import compute_quadrants

__all__ = [
    "BlendMode",
    "Canvas",
    "Colour",
    "CompositeStatus",
    "Coordinate",
    "MosaicConfigurationError",
    "MosaicError",
    "MosaicProcess",
    "MosaicResult",
    "MosaicSettings",
    "Picture",
    "average_colour",
    "blend",
    "candidate_averages",
    "composite",
    "compute_quadrants",
    "compute_tile_size",
    "load_candidates",
    "load_picture",
    "make_comparison_grid",
    "min_difference_index",
    "preview",
    "save_picture",
    "select_blend_mode",
]
