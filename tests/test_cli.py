"""Smoke tests for the Typer command-line interface."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from photomosaic.cli import app

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Source images and candidate tiles laid out like a real project."""
    images = tmp_path / "images"
    candidates = tmp_path / "candidates"
    images.mkdir()
    candidates.mkdir()

    rng = np.random.default_rng(3)
    Image.fromarray(
        rng.integers(0, 256, (24, 32, 3), dtype=np.uint8),
    ).save(images / "photo.png")
    for i, colour in enumerate([(255, 0, 0), (0, 255, 0), (0, 0, 255), (240, 240, 240)]):
        Image.new("RGB", (5, 5), colour).save(candidates / f"tile_{i}.png")
    return tmp_path


def test_single(workspace: Path) -> None:
    out = workspace / "out" / "mosaic.png"
    preview_path = workspace / "out" / "preview.png"
    result = runner.invoke(app, [
        "single", str(workspace / "images" / "photo.png"),
        "--candidates", str(workspace / "candidates"),
        "--output", str(out),
        "--scalar", "2",
        "--power-index", "8",
        "--workers", "3",
        "--preview", str(preview_path),
    ])
    assert result.exit_code == 0, result.output
    assert Image.open(out).size == (64, 48)
    assert Image.open(preview_path).size == (1500, 1125)
    assert (workspace / "out" / "mosaic_comparison.png").exists()


def test_single_no_comparison(workspace: Path) -> None:
    out = workspace / "out" / "mosaic.png"
    result = runner.invoke(app, [
        "single", str(workspace / "images" / "photo.png"),
        "--candidates", str(workspace / "candidates"),
        "--output", str(out),
        "--power-index", "8",
        "--no-comparison",
    ])
    assert result.exit_code == 0, result.output
    assert out.exists()
    assert not (workspace / "out" / "mosaic_comparison.png").exists()


def test_single_without_candidates(workspace: Path) -> None:
    empty = workspace / "empty"
    empty.mkdir()
    result = runner.invoke(app, [
        "single", str(workspace / "images" / "photo.png"),
        "--candidates", str(empty),
        "--output", str(workspace / "out.png"),
        "--power-index", "8",
    ])
    assert result.exit_code == 1
    assert not (workspace / "out.png").exists()


def test_single_power_index_too_large(workspace: Path) -> None:
    result = runner.invoke(app, [
        "single", str(workspace / "images" / "photo.png"),
        "--candidates", str(workspace / "candidates"),
        "--output", str(workspace / "out.png"),
        "--power-index", "64",
    ])
    assert result.exit_code == 1


def test_batch(workspace: Path) -> None:
    out_dir = workspace / "output"
    result = runner.invoke(app, [
        "batch",
        "--input", str(workspace / "images"),
        "--candidates", str(workspace / "candidates"),
        "--output", str(out_dir),
        "--power-index", "4",
        "--step", "2",
    ])
    assert result.exit_code == 0, result.output
    assert (out_dir / "photo_mosaic.png").exists()
    assert (out_dir / "photo_comparison.png").exists()


def test_batch_no_images(tmp_path: Path) -> None:
    result = runner.invoke(app, [
        "batch",
        "--input", str(tmp_path / "nothing"),
        "--output", str(tmp_path / "output"),
    ])
    assert result.exit_code == 0
    assert "No images found" in result.output
