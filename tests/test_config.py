"""Tests for configuration module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

from gluon_autobuild.config import (
    DEFAULT_SITES,
    Settings,
    get_settings,
    print_settings_json,
)


class TestSettings:
    """Test Settings class."""

    def test_default_settings(self, tmp_path: Path) -> None:
        """Settings should default to the current directory layout."""
        settings = Settings()
        root = tmp_path.resolve()

        assert settings.root_dir == root
        assert settings.resolved_gluon_dir == root / "gluon"
        assert settings.resolved_build_script == root / "build.sh"
        assert settings.resolved_log_file == root / "output" / "build.log"
        assert settings.experimental_base_version == "2018.2"
        assert settings.release_label == "mwu"
        assert settings.log_level == "INFO"

    def test_default_sites(self) -> None:
        """Default site list should be the built-in one."""
        settings = Settings()
        assert settings.sites == DEFAULT_SITES
        assert settings.site_list == ["mainz", "wiesbaden", "rheingau", "taunus"]

    def test_settings_from_env(self) -> None:
        """Settings should be loadable from environment variables."""
        with patch.dict(
            os.environ,
            {
                "GLUON_AUTOBUILD_SITES": "alpha  beta",
                "GLUON_AUTOBUILD_LOG_LEVEL": "DEBUG",
                "GLUON_AUTOBUILD_EXPERIMENTAL_BASE_VERSION": "2023.2",
            },
        ):
            settings = Settings()
            assert settings.site_list == ["alpha", "beta"]
            assert settings.log_level == "DEBUG"
            assert settings.experimental_base_version == "2023.2"

    def test_explicit_paths_win(self, tmp_path: Path) -> None:
        """Explicit paths should not be rebased on root_dir."""
        settings = Settings(
            root_dir=tmp_path / "site",
            gluon_dir=Path("/opt/gluon"),
            log_file=Path("/var/log/autobuild.log"),
        )
        assert settings.resolved_gluon_dir == Path("/opt/gluon")
        assert settings.resolved_log_file == Path("/var/log/autobuild.log")
        assert settings.resolved_build_script == tmp_path / "site" / "build.sh"

    def test_root_dir_from_env(self) -> None:
        """Root dir should be configurable via env."""
        with patch.dict(os.environ, {"GLUON_AUTOBUILD_ROOT_DIR": "/srv/site"}):
            settings = Settings()
            assert settings.resolved_gluon_dir == Path("/srv/site/gluon")


class TestGetSettings:
    """Test get_settings function."""

    def test_get_settings_returns_settings(self) -> None:
        """get_settings should return a Settings instance."""
        assert isinstance(get_settings(), Settings)


class TestPrintSettingsJson:
    """Test print_settings_json function."""

    def test_print_settings_json(self, tmp_path: Path) -> None:
        """print_settings_json should return valid JSON with resolved paths."""
        settings = Settings(root_dir=tmp_path)
        parsed = json.loads(print_settings_json(settings))

        assert parsed["root_dir"] == str(tmp_path)
        assert parsed["gluon_dir"] == str(tmp_path / "gluon")
        assert parsed["build_script"] == str(tmp_path / "build.sh")
        assert parsed["log_file"] == str(tmp_path / "output" / "build.log")
        assert parsed["sites"] == DEFAULT_SITES

    def test_print_settings_json_default(self) -> None:
        """print_settings_json without args should use default settings."""
        parsed = json.loads(print_settings_json())
        assert "release_label" in parsed
