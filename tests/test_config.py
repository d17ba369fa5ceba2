"""
Tests for fleetdash.config.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from fleetdash.config import (
    CONFIG_DIR,
    BackendSettings,
    DashboardConfig,
    NotificationSettings,
    get_config,
    load_config,
    reload_config,
)


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "dashboard.toml"
    path.write_text(text)
    return path


class TestLoadConfig:
    """Tests for load_config()."""

    def test_bundled_defaults(self) -> None:
        config = load_config(CONFIG_DIR / "dashboard.toml")
        assert config.backend.base_url == "http://localhost:8080"
        assert config.backend.timeout == 10.0
        assert config.notifications.entry_delay == 0.1
        assert config.notifications.display_duration == 5.0
        assert config.notifications.exit_delay == 0.3
        assert config.devserver.port == 8080
        assert config.devserver.seed is None

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(write(tmp_path, ""))
        assert config == DashboardConfig()

    def test_overrides(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            """
            [backend]
            base_url = "http://admin.example:9000/"
            timeout = 3

            [notifications]
            display_duration = 2.5

            [devserver]
            players = 3
            seed = 7
            """,
        )
        config = load_config(path)
        assert config.backend.base_url == "http://admin.example:9000"
        assert config.backend.timeout == 3.0
        assert config.notifications.display_duration == 2.5
        assert config.notifications.entry_delay == 0.1
        assert config.devserver.players == 3
        assert config.devserver.seed == 7

    def test_invalid_values_fall_back(self, tmp_path: Path) -> None:
        path = write(
            tmp_path,
            """
            [backend]
            timeout = "soon"

            [notifications]
            exit_delay = -1

            [devserver]
            port = true
            seed = "abc"
            """,
        )
        config = load_config(path)
        assert config.backend.timeout == 10.0
        assert config.notifications.exit_delay == 0.3
        assert config.devserver.port == 8080
        assert config.devserver.seed is None

    def test_scalar_section_falls_back(self, tmp_path: Path) -> None:
        """A value where a table is expected is ignored with a warning."""
        path = write(
            tmp_path,
            """
            backend = "http://x"
            notifications = 5

            [devserver]
            players = 2
            """,
        )
        config = load_config(path)
        assert config.backend == BackendSettings()
        assert config.notifications == NotificationSettings()
        assert config.devserver.players == 2

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write(tmp_path, '[backend]\nbase_url = "http://env:1"\n')
        monkeypatch.setenv("FLEETDASH_CONFIG", str(path))
        assert load_config().backend.base_url == "http://env:1"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")


class TestCachedConfig:
    """Tests for get_config()/reload_config()."""

    def test_cached_and_reloaded(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FLEETDASH_CONFIG", raising=False)
        first = reload_config()
        assert get_config() is first

        path = write(tmp_path, '[backend]\nbase_url = "http://other:2"\n')
        second = reload_config(path)
        assert second is not first
        assert get_config().backend.base_url == "http://other:2"
        reload_config(CONFIG_DIR / "dashboard.toml")
