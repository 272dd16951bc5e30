"""Shared fixtures."""

from pathlib import Path

import pytest

from tridactyl_native.config import Config


@pytest.fixture
def cfg(tmp_path: Path) -> Config:
    """Config rooted in temporary home, config and data directories."""
    home = tmp_path / "home"
    home.mkdir()
    return Config(home_dir=home, config_dir=home / ".config", data_dir=tmp_path / "data", expand_env=True)
