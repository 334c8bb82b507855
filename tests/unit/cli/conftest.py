"""Fixtures for CLI command tests."""

from pathlib import Path

import pytest
from appdeck.core.config import AppdeckConfig, save_config


@pytest.fixture
def configured(sample_roots: tuple[Path, ...]) -> tuple[Path, ...]:
    """Write a config file that scans the sample roots."""
    save_config(AppdeckConfig(roots=list(sample_roots), opener="open"))
    return sample_roots
