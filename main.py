#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Drop source images into ``images/`` and tile pictures into
``candidates/``, then run:

    python main.py

Or use the full CLI:

    python -m photomosaic.cli batch --help
    python -m photomosaic.cli single my_photo.jpg --candidates tiles/
"""

from photomosaic.cli import app

if __name__ == "__main__":
    app()
