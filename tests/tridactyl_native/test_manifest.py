"""Tests for native messaging manifest installation."""

import json
from pathlib import Path

from tridactyl_native.config import Config
from tridactyl_native.manifest import build_manifest, install_manifests

EXE = Path("/opt/bin/tridactyl-native")


class TestBuildManifest:
    """Manifest contents."""

    def test_fields(self, cfg: Config):
        """Manifest points at the executable and allows the configured extensions."""
        manifest = build_manifest(cfg, EXE)
        assert manifest["name"] == "tridactyl"
        assert manifest["path"] == str(EXE)
        assert manifest["type"] == "stdio"
        assert manifest["allowed_extensions"] == list(cfg.allowed_extensions)


class TestInstallManifests:
    """Writing manifests into browser profile roots."""

    def test_installs_for_present_browsers(self, cfg: Config):
        """Only browsers whose profile root exists receive a manifest."""
        (cfg.home_dir / ".librewolf").mkdir()
        written = install_manifests(cfg, EXE)
        expected = cfg.home_dir / ".librewolf" / "native-messaging-hosts" / "tridactyl.json"
        assert written == [expected]
        assert json.loads(expected.read_text())["path"] == str(EXE)
        assert not (cfg.home_dir / ".mozilla").exists()

    def test_overwrites_existing(self, cfg: Config):
        """An existing manifest is replaced."""
        hosts = cfg.home_dir / ".mozilla" / "native-messaging-hosts"
        hosts.mkdir(parents=True)
        (hosts / "tridactyl.json").write_text("stale")
        install_manifests(cfg, EXE)
        assert json.loads((hosts / "tridactyl.json").read_text())["name"] == "tridactyl"

    def test_no_browsers(self, cfg: Config):
        """Nothing is written without browser profile roots."""
        assert install_manifests(cfg, EXE) == []
