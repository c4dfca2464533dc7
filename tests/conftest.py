"""Shared fixtures: tiny source images and mask directories on disk."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# 2x2 source used by the end-to-end examples, row-major:
# (0,0) red, (1,0) green, (0,1) blue, (1,1) dark gray-blue
SOURCE_PIXELS = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (10, 20, 30)]


def make_buffer(pixels, width, height):
    return np.array(pixels, dtype=np.uint8).reshape(height, width, 3)


def write_png(path: Path, pixels, width, height) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(make_buffer(pixels, width, height)).save(path, format="PNG")
    return path


@pytest.fixture(autouse=True)
def restore_root_logging():
    """cli.run() reconfigures the root logger; drop the handlers it installed."""
    root = logging.getLogger()
    level = root.level
    yield
    for h in list(root.handlers):
        # exact types: pytest's own capture handlers are subclasses
        if type(h) in (logging.StreamHandler, RotatingFileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def source_buffer():
    return make_buffer(SOURCE_PIXELS, 2, 2)


@pytest.fixture
def random_buffer():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(7, 11, 3), dtype=np.uint8)


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """CWD with filters/ and patterns/ masks plus a 2x2 source image."""
    write_png(tmp_path / "filters" / "white.png", [(255, 255, 255)], 1, 1)
    write_png(tmp_path / "filters" / "stencil.png", [(0, 255, 255)], 1, 1)
    write_png(tmp_path / "filters" / "half.png", [(0, 9, 9), (255, 255, 255)], 2, 1)
    write_png(tmp_path / "patterns" / "white.png", [(255, 255, 255)], 1, 1)
    write_png(tmp_path / "src.png", SOURCE_PIXELS, 2, 2)
    monkeypatch.chdir(tmp_path)
    return tmp_path
