from __future__ import annotations
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from chromamask.errors import ArgumentError

ENV_PREFIX = "CHROMAMASK_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    filters_dir: str = "filters"
    patterns_dir: str = "patterns"
    workers: int = 1
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    overwrite: bool = True

    def __post_init__(self):
        if self.workers < 1:
            raise ArgumentError(f"workers must be at least 1, got {self.workers}")
        if self.log_level not in LOG_LEVELS:
            raise ArgumentError(f"unknown log level {self.log_level!r} (expected one of: {', '.join(LOG_LEVELS)})")

    @staticmethod
    def from_env(environ: Mapping[str, str] = None) -> "Settings":
        obj = os.environ if environ is None else environ
        get = lambda key, default: obj.get(ENV_PREFIX + key, default)
        try:
            workers = int(get("WORKERS", 1))
        except ValueError:
            raise ArgumentError(f"{ENV_PREFIX}WORKERS must be an integer, got {get('WORKERS', '')!r}") from None
        return Settings(
            filters_dir=str(get("FILTERS_DIR", "filters")),
            patterns_dir=str(get("PATTERNS_DIR", "patterns")),
            workers=workers,
            log_level=str(get("LOG_LEVEL", "INFO")).upper(),
            log_dir=get("LOG_DIR", None) or None,
        )

    def override(self, **changes) -> "Settings":
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
