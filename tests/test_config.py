"""Tests for Settings defaults, environment overrides and validation."""

import pytest

from chromamask.config import Settings
from chromamask.errors import ArgumentError


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert (s.filters_dir, s.patterns_dir) == ("filters", "patterns")
        assert s.workers == 1
        assert s.log_level == "INFO"
        assert s.log_dir is None
        assert s.overwrite is True

    def test_from_empty_env(self):
        assert Settings.from_env({}) == Settings()

    def test_from_env(self):
        s = Settings.from_env({
            "CHROMAMASK_FILTERS_DIR": "/masks/f",
            "CHROMAMASK_PATTERNS_DIR": "/masks/p",
            "CHROMAMASK_WORKERS": "4",
            "CHROMAMASK_LOG_LEVEL": "debug",
            "CHROMAMASK_LOG_DIR": "/var/log/cm",
            "UNRELATED": "x",
        })
        assert s == Settings("/masks/f", "/masks/p", 4, "DEBUG", "/var/log/cm")

    def test_empty_log_dir_means_none(self):
        assert Settings.from_env({"CHROMAMASK_LOG_DIR": ""}).log_dir is None

    def test_bad_workers(self):
        with pytest.raises(ArgumentError):
            Settings.from_env({"CHROMAMASK_WORKERS": "many"})
        with pytest.raises(ArgumentError):
            Settings(workers=0)

    def test_bad_log_level(self):
        with pytest.raises(ArgumentError):
            Settings(log_level="LOUD")

    def test_override_skips_none(self):
        s = Settings(workers=3).override(workers=None, filters_dir="x", overwrite=False)
        assert s.workers == 3
        assert s.filters_dir == "x"
        assert s.overwrite is False
