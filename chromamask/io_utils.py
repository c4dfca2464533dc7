from __future__ import annotations
from pathlib import Path
from typing import Dict, Mapping, Union
import os
import tempfile
import logging

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from chromamask.convert import rgb8_array
from chromamask.errors import ResourceError
from chromamask.mask import TiledMask

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

FILTERS = "filters"
PATTERNS = "patterns"


def load_image(path: PathLike) -> Image.Image:
    try:
        img = Image.open(path)
        img = ImageOps.exif_transpose(img)
        # Pillow lazy loads; ensure it's loaded now
        img.load()
    except FileNotFoundError:
        raise ResourceError(path, "no such file") from None
    except UnidentifiedImageError as e:
        raise ResourceError(path, "not a recognised image format") from e
    except OSError as e:
        raise ResourceError(path, str(e)) from e
    logger.debug("Loaded %s (%s, %dx%d)", path, img.mode, img.width, img.height)
    return img


def to_buffer(img: Image.Image) -> np.ndarray:
    """Writable (H, W, 3) uint8 RGB copy of ``img``."""
    return rgb8_array(img)


def from_buffer(buffer: np.ndarray, luma: bool = False) -> Image.Image:
    img = Image.fromarray(np.ascontiguousarray(buffer))
    if luma:
        # channels are equal after a luma transform, so this is lossless
        return img.convert("L")
    return img


def save_png(img: Image.Image, path: PathLike, overwrite: bool = True) -> None:
    path = os.fspath(path)
    parent = os.path.dirname(path) or "."
    os.makedirs(parent, exist_ok=True)
    if os.path.exists(path) and not overwrite:
        raise FileExistsError(path)
    # encode next to the target, then swap in: a failed encode leaves nothing behind
    fd, tmp = tempfile.mkstemp(prefix=".chromamask-", suffix=".png", dir=parent)
    try:
        with os.fdopen(fd, "wb") as f:
            img.save(f, format="PNG", optimize=True, compress_level=9)
        # mkstemp creates 0600; give the output the usual umask-derived mode
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(tmp, 0o666 & ~umask)
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise
    logger.info("Wrote %s", path)


def make_output_path(mask_name: str, image_path: PathLike, *parts: str) -> str:
    """``"<mask> - <part> - ... - <stem>.png"`` in the current directory."""
    stem = Path(image_path).stem
    if not stem:
        raise ResourceError(image_path, "image path has no file name")
    return " - ".join([mask_name, *parts, stem]) + ".png"


class MaskSource:
    """Resolves mask names of a given kind (``filters``, ``patterns``) to masks."""

    def load(self, kind: str, name: str) -> TiledMask:
        raise NotImplementedError


class DirectoryMaskSource(MaskSource):
    """Masks stored as image files under one root directory per kind."""

    def __init__(self, roots: Mapping[str, PathLike]):
        self.roots: Dict[str, Path] = {k: Path(v) for k, v in roots.items()}

    def path_for(self, kind: str, name: str) -> Path:
        try:
            root = self.roots[kind]
        except KeyError:
            raise ResourceError(name, f"unknown mask kind {kind!r}") from None
        return root / name

    def load(self, kind: str, name: str) -> TiledMask:
        path = self.path_for(kind, name)
        img = load_image(path)
        return TiledMask.from_image(img, name=str(path))


class MemoryMaskSource(MaskSource):
    """In-memory masks keyed by (kind, name); handy for tests and embedding."""

    def __init__(self, masks: Mapping[tuple, Union[TiledMask, Image.Image, np.ndarray]] = ()):
        self._masks: Dict[tuple, TiledMask] = {}
        for (kind, name), m in dict(masks).items():
            self.add(kind, name, m)

    def add(self, kind: str, name: str, mask) -> None:
        if isinstance(mask, Image.Image):
            mask = TiledMask.from_image(mask, name=name)
        elif not isinstance(mask, TiledMask):
            mask = TiledMask(mask, name=name)
        self._masks[(kind, name)] = mask

    def load(self, kind: str, name: str) -> TiledMask:
        try:
            return self._masks[(kind, name)]
        except KeyError:
            raise ResourceError(f"{kind}/{name}", "no such mask") from None
