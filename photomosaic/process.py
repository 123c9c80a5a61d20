"""End-to-end mosaic run: average, match, blend, composite."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass

from photomosaic.blending import BlendMode, select_blend_mode
from photomosaic.compositor import CompositeStatus, composite
from photomosaic.config import MosaicSettings
from photomosaic.errors import MosaicConfigurationError
from photomosaic.image_io import resize_picture
from photomosaic.matcher import candidate_averages, require_candidates
from photomosaic.picture import Canvas, Picture
from photomosaic.quadrants import compute_quadrants

logger = logging.getLogger(__name__)


def compute_tile_size(width: int, power_index: int, scalar: int) -> int:
    """Side of one destination tile, always a multiple of *scalar*.

    The upscaled width is divided into roughly *power_index* tiles.

    Raises:
        MosaicConfigurationError: if the result would be zero pixels.
    """
    tile_size = width * scalar // power_index // scalar * scalar
    if tile_size < 1:
        msg = (
            f"power index {power_index} is too large for a {width}px wide "
            f"picture (tile size would be 0)"
        )
        raise MosaicConfigurationError(msg)
    return tile_size


@dataclass(frozen=True)
class MosaicResult:
    """Outcome of :meth:`MosaicProcess.run`."""

    mosaic: Picture
    status: CompositeStatus
    blend_mode: BlendMode
    tile_size: int
    quadrant_count: int

    @property
    def cancelled(self) -> bool:
        return self.status is CompositeStatus.CANCELLED


class MosaicProcess:
    """Turns one source picture into a mosaic of candidate pictures.

    Geometry is fixed at construction: the canvas is the source upscaled by
    ``settings.scalar`` and tiles are :attr:`tile_size` pixels square on
    the canvas, :attr:`tile_step` pixels square on the original.
    Candidates should already be :attr:`tile_size` square.
    """

    def __init__(self, settings: MosaicSettings, source: Picture) -> None:
        if source.width == 0 or source.height == 0:
            msg = "Source picture is empty"
            raise MosaicConfigurationError(msg)

        self.settings = settings
        self.source = source
        self.old_width = source.width
        self.old_height = source.height
        self.new_width = self.old_width * settings.scalar
        self.new_height = self.old_height * settings.scalar
        self.tile_size = compute_tile_size(
            self.old_width, settings.power_index, settings.scalar,
        )
        self.tile_step = self.tile_size // settings.scalar

    def run(
        self,
        candidates: Sequence[Picture],
        cancel_event: threading.Event | None = None,
    ) -> MosaicResult:
        """Build the mosaic.

        Averaging always runs to completion; *cancel_event* is honoured
        between the two phases and between tile rows while compositing.
        """
        require_candidates(candidates)
        s = self.settings
        t_total = time.perf_counter()

        quadrants = compute_quadrants(
            self.source, self.tile_step, s.quadrant_sampling_step, s.workers,
        )
        blend_mode = select_blend_mode(quadrants)
        averages = candidate_averages(candidates, s.quadrant_sampling_step)

        canvas = Canvas(resize_picture(self.source, self.new_width, self.new_height))

        if cancel_event is not None and cancel_event.is_set():
            logger.info("Cancelled before compositing")
            status = CompositeStatus.CANCELLED
        else:
            status = composite(
                canvas, quadrants, candidates, averages,
                self.tile_size, blend_mode, s.workers, cancel_event,
            )

        logger.info(
            "Mosaic %dx%d %s  (%.2f s)",
            self.new_width, self.new_height, status.value,
            time.perf_counter() - t_total,
        )
        return MosaicResult(
            mosaic=canvas.to_picture(),
            status=status,
            blend_mode=blend_mode,
            tile_size=self.tile_size,
            quadrant_count=len(quadrants),
        )
