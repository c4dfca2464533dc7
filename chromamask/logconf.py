import logging
import os
from logging.handlers import RotatingFileHandler
import sys
from typing import Optional

_LOG_NAME = "chromamask.log"


def setup_logging(level=logging.INFO, log_dir: Optional[str] = None) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    ch = logging.StreamHandler(stream=sys.stderr)
    ch.setFormatter(fmt)
    ch.setLevel(level)
    root.addHandler(ch)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = RotatingFileHandler(log_path(log_dir), maxBytes=5_000_000, backupCount=3)
        fh.setFormatter(fmt)
        fh.setLevel(logging.DEBUG)
        root.addHandler(fh)
        root.setLevel(min(level, logging.DEBUG))

    # Tame noisy libs
    logging.getLogger("PIL").setLevel(logging.WARNING)


def log_path(log_dir: str) -> str:
    return os.path.join(os.path.abspath(log_dir), _LOG_NAME)
