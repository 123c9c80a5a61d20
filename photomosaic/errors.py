"""Exception hierarchy for mosaic construction."""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for every error raised by :mod:`photomosaic`."""


class MosaicConfigurationError(MosaicError, ValueError):
    """The run cannot start (or continue) with the given configuration.

    Raised for an empty candidate list, a tile size that rounds down to
    zero, invalid settings, or an averaging grid that does not match the
    compositing grid.
    """
