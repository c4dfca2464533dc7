from __future__ import annotations
import faulthandler
import os
import sys
import threading
import traceback
from datetime import datetime, timezone
from typing import Optional
import logging

logger = logging.getLogger("Errors")


class ChromaError(Exception):
    """Base class for every failure the CLI turns into a non-zero exit."""


class ArgumentError(ChromaError):
    """Missing or unrecognised mode / colour argument."""


class ResourceError(ChromaError):
    """An image or mask file is missing, unreadable or not decodable."""

    def __init__(self, path, reason: str = ""):
        self.path = str(path)
        self.reason = reason
        msg = f"cannot read image {self.path!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class DegenerateMaskError(ChromaError):
    """Mask with zero width or height; tiling would divide by zero."""


class InvalidBufferError(ChromaError):
    """Pixel array of the wrong shape, dtype or writability."""


class OutputError(ChromaError):
    """The result could not be written (target exists, unwritable path, encode failure)."""


# Keep strong refs so they aren't GC'd
_faulthandler_file: Optional[object] = None


def _write_dump(dump_dir: str, prefix: str, exc_text: str) -> None:
    os.makedirs(dump_dir, exist_ok=True)
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    path = os.path.join(dump_dir, f"{prefix}_{ts}.dump")
    with open(path, "w", encoding="utf-8") as f:
        f.write(exc_text)
    logger.error("Wrote exception dump: %s", path)


def install_global_exception_hooks(dump_dir: str) -> None:
    """
    Capture: sys.excepthook, threading.excepthook and native crashes via
    faulthandler. Dumps land in ``dump_dir``.
    """
    global _faulthandler_file
    dump_dir = os.path.abspath(dump_dir)
    os.makedirs(dump_dir, exist_ok=True)

    # 1) Python uncaught exceptions
    def excepthook(exc_type, exc, tb):
        buf = "".join(traceback.format_exception(exc_type, exc, tb))
        logger.critical("Uncaught exception:\n%s", buf)
        _write_dump(dump_dir, "uncaught", buf)
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = excepthook

    # 2) Threading exceptions
    def threading_hook(args: threading.ExceptHookArgs):
        buf = "".join(traceback.format_exception(args.exc_type, args.exc_value, args.exc_traceback))
        logger.critical("Thread exception in %s:\n%s", getattr(args.thread, "name", "<unknown>"), buf)
        _write_dump(dump_dir, "thread", buf)

    threading.excepthook = threading_hook

    # 3) Faulthandler for native crashes: requires a *binary* file kept alive
    crash_dump = os.path.join(dump_dir, "crash.dump")
    try:
        _faulthandler_file = open(crash_dump, "ab", buffering=0)
        faulthandler.enable(file=_faulthandler_file, all_threads=True)
        logger.debug("Faulthandler enabled: %s", crash_dump)
    except OSError as e:
        logger.warning("Failed to enable faulthandler: %s", e)
