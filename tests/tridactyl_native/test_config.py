"""Tests for Config model validation and computed paths."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tridactyl_native.config import VERSION, Config

HOME = Path("/fake/home")
CONFIG_DIR = Path("/fake/home/.config")
DATA_DIR = Path("/fake/home/.local/share")


def make_config(**kwargs: object) -> Config:
    return Config(home_dir=HOME, config_dir=CONFIG_DIR, data_dir=DATA_DIR, **kwargs)


class TestConfigPaths:
    """Computed path properties derive from the platform directories."""

    def test_log_dir(self):
        """Log directory is data_dir / app_name."""
        assert make_config().log_dir == DATA_DIR / "tridactyl"

    def test_log_path(self):
        """Log file is named after the app."""
        assert make_config().log_path == DATA_DIR / "tridactyl" / "tridactyl.log"

    def test_rc_candidates_order(self):
        """Config directory candidate comes before the home dot-file."""
        assert make_config().rc_candidates == (CONFIG_DIR / "tridactyl" / "tridactylrc", HOME / ".tridactylrc")

    def test_app_name_drives_paths(self):
        """Changing app_name changes the derived paths."""
        cfg = make_config(app_name="other", rc_filename="otherrc")
        assert cfg.log_path == DATA_DIR / "other" / "other.log"
        assert cfg.rc_candidates[0] == CONFIG_DIR / "other" / "otherrc"
        assert cfg.rc_candidates[1] == HOME / ".otherrc"


class TestManifestDirs:
    """Browser profile roots that exist under home."""

    def test_only_existing_browsers(self, tmp_path: Path):
        """Missing browser roots are skipped."""
        (tmp_path / ".mozilla").mkdir()
        cfg = Config(home_dir=tmp_path, config_dir=tmp_path, data_dir=tmp_path)
        assert cfg.manifest_dirs() == [tmp_path / ".mozilla" / "native-messaging-hosts"]

    def test_none_installed(self, tmp_path: Path):
        """No browser roots yields an empty list."""
        cfg = Config(home_dir=tmp_path, config_dir=tmp_path, data_dir=tmp_path)
        assert cfg.manifest_dirs() == []


class TestConfigValidation:
    """Defaults and immutability."""

    def test_defaults(self):
        """Default values for optional fields."""
        cfg = make_config()
        assert cfg.app_name == "tridactyl"
        assert cfg.version == VERSION
        assert cfg.manifest_name == "tridactyl.json"
        assert cfg.browsers == (".mozilla", ".librewolf")

    def test_frozen(self):
        """Config cannot be mutated after construction."""
        cfg = make_config()
        with pytest.raises(ValidationError):
            cfg.version = "9.9.9"

    def test_build_uses_override(self, tmp_path: Path):
        """Explicit data_dir wins over the platform default."""
        cfg = Config.build(tmp_path)
        assert cfg.data_dir == tmp_path
        assert cfg.home_dir == Path.home()
