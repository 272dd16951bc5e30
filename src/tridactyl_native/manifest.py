"""Native messaging manifest installation for browser profiles."""

import json
import logging
from pathlib import Path

from tridactyl_native.config import Config

logger = logging.getLogger(__name__)


def build_manifest(cfg: Config, executable: Path) -> dict[str, object]:
    """Build the native messaging host manifest pointing at ``executable``."""
    return {
        "name": cfg.app_name,
        "description": "Tridactyl native command handler",
        "path": str(executable),
        "type": "stdio",
        "allowed_extensions": list(cfg.allowed_extensions),
    }


def install_manifests(cfg: Config, executable: Path) -> list[Path]:
    """Write the manifest into every browser profile root present under home. Return written paths."""
    content = json.dumps(build_manifest(cfg, executable), indent=2) + "\n"
    written: list[Path] = []
    for hosts_dir in cfg.manifest_dirs():
        hosts_dir.mkdir(parents=True, exist_ok=True)
        path = hosts_dir / cfg.manifest_name
        path.write_text(content, encoding="utf-8")
        logger.info("Installed manifest to %s", path)
        written.append(path)
    return written
