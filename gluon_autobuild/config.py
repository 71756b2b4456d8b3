"""Configuration settings for gluon_autobuild.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SITES = "mainz wiesbaden rheingau taunus"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the GLUON_AUTOBUILD_
    prefix. Paths left unset are resolved relative to ``root_dir``.
    """

    model_config = SettingsConfigDict(
        env_prefix="GLUON_AUTOBUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    root_dir: Path = Field(
        default_factory=Path.cwd,
        description="Site repository root holding build.sh and the gluon submodule",
    )
    gluon_dir: Path | None = Field(
        default=None,
        description="Gluon checkout (defaults to <root_dir>/gluon)",
    )
    build_script: Path | None = Field(
        default=None,
        description="Build script invoked per phase (defaults to <root_dir>/build.sh)",
    )
    log_file: Path | None = Field(
        default=None,
        description="Run log (defaults to <root_dir>/output/build.log)",
    )

    # Release naming
    sites: str = Field(
        default=DEFAULT_SITES,
        description="Space separated list of sites built when -s is not given",
    )
    experimental_base_version: str = Field(
        default="2018.2",
        min_length=1,
        description="Gluon version used in experimental release names",
    )
    release_label: str = Field(
        default="mwu",
        min_length=1,
        description="Community label placed between '+' and the release suffix",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def site_list(self) -> list[str]:
        """Default sites as a list."""
        return self.sites.split()

    @property
    def resolved_gluon_dir(self) -> Path:
        return self.gluon_dir or self.root_dir / "gluon"

    @property
    def resolved_build_script(self) -> Path:
        return self.build_script or self.root_dir / "build.sh"

    @property
    def resolved_log_file(self) -> Path:
        return self.log_file or self.root_dir / "output" / "build.log"


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Unset paths are shown with their resolved values.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    effective = settings.model_copy(
        update={
            "gluon_dir": settings.resolved_gluon_dir,
            "build_script": settings.resolved_build_script,
            "log_file": settings.resolved_log_file,
        }
    )
    return effective.model_dump_json(indent=2)


__all__ = ["DEFAULT_SITES", "Settings", "get_settings", "print_settings_json"]
