"""Centralized application configuration."""

import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ConfigDict, Field, computed_field

VERSION = "0.5.0"

DEFAULT_ALLOWED_EXTENSIONS = (
    "tridactyl.vim@cmcaine.co.uk",
    "tridactyl.vim.betas@cmcaine.co.uk",
    "tridactyl.vim.betas.nonewtab@cmcaine.co.uk",
)


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    home_dir: Path = Field(description="Home directory of the invoking user")
    config_dir: Path = Field(description="Platform configuration directory")
    data_dir: Path = Field(description="Platform data directory, holds the log directory")
    app_name: str = Field(default="tridactyl", description="Application name used for directory and file names")
    rc_filename: str = Field(default="tridactylrc", description="RC file name")
    version: str = Field(default=VERSION, description="Version reported by the version command")
    manifest_name: str = Field(default="tridactyl.json", description="Native messaging manifest file name")
    browsers: tuple[str, ...] = Field(default=(".mozilla", ".librewolf"), description="Browser profile roots under home")
    allowed_extensions: tuple[str, ...] = Field(default=DEFAULT_ALLOWED_EXTENSIONS, description="Extensions allowed to connect")
    expand_env: bool = Field(default=os.name == "posix", description="Substitute $VAR tokens in request paths")

    @computed_field(description="Log directory")
    @property
    def log_dir(self) -> Path:
        """Log directory."""
        return self.data_dir / self.app_name

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.log_dir / f"{self.app_name}.log"

    @computed_field(description="RC file locations, highest priority first")
    @property
    def rc_candidates(self) -> tuple[Path, ...]:
        """RC file locations, highest priority first."""
        return (self.config_dir / self.app_name / self.rc_filename, self.home_dir / f".{self.rc_filename}")

    def manifest_dirs(self) -> list[Path]:
        """Native messaging host directories of browsers installed under home."""
        return [self.home_dir / browser / "native-messaging-hosts" for browser in self.browsers if (self.home_dir / browser).exists()]

    @staticmethod
    def build(data_dir: Path | None = None) -> "Config":
        """Build a Config from the platform directories of the current user."""
        return Config(
            home_dir=Path.home(),
            config_dir=Path(user_config_dir()),
            data_dir=data_dir if data_dir is not None else Path(user_data_dir()),
        )
