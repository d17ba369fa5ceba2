"""
Configuration management for fleetdash.

Settings are read from a TOML file. The default file ships next to this
module; `FLEETDASH_CONFIG` or an explicit path selects another one. Missing
keys fall back to the defaults below.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Path to the config directory
CONFIG_DIR = Path(__file__).parent

CONFIG_ENV_VAR = "FLEETDASH_CONFIG"


@dataclass
class BackendSettings:
    """Where the metadata backend lives."""

    base_url: str = "http://localhost:8080"
    timeout: float = 10.0


@dataclass
class NotificationSettings:
    """Notification lifecycle timings, in seconds."""

    entry_delay: float = 0.1
    display_duration: float = 5.0
    exit_delay: float = 0.3


@dataclass
class DevServerSettings:
    """Settings for the in-memory development backend."""

    host: str = "127.0.0.1"
    port: int = 8080
    players: int = 25
    servers: int = 5
    prefix: str = "local"
    seed: int | None = None


@dataclass
class DashboardConfig:
    """Loaded fleetdash configuration."""

    backend: BackendSettings = field(default_factory=BackendSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    devserver: DevServerSettings = field(default_factory=DevServerSettings)


def _number(section: dict[str, Any], key: str, default: float, path: Path) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        logger.warning("Config %s: invalid %s=%r, using %s", path, key, value, default)
        return default
    return float(value)


def _integer(section: dict[str, Any], key: str, default: int, path: Path) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        logger.warning("Config %s: invalid %s=%r, using %s", path, key, value, default)
        return default
    return value


def _section(data: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        logger.warning("Config %s: [%s] must be a table, using defaults", path, name)
        return {}
    return section


def _parse(data: dict[str, Any], path: Path) -> DashboardConfig:
    backend = _section(data, "backend", path)
    notifications = _section(data, "notifications", path)
    devserver = _section(data, "devserver", path)

    seed = devserver.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        logger.warning("Config %s: invalid seed=%r, ignoring", path, seed)
        seed = None

    return DashboardConfig(
        backend=BackendSettings(
            base_url=str(backend.get("base_url", BackendSettings.base_url)).rstrip("/"),
            timeout=_number(backend, "timeout", BackendSettings.timeout, path),
        ),
        notifications=NotificationSettings(
            entry_delay=_number(
                notifications, "entry_delay", NotificationSettings.entry_delay, path
            ),
            display_duration=_number(
                notifications, "display_duration", NotificationSettings.display_duration, path
            ),
            exit_delay=_number(notifications, "exit_delay", NotificationSettings.exit_delay, path),
        ),
        devserver=DevServerSettings(
            host=str(devserver.get("host", DevServerSettings.host)),
            port=_integer(devserver, "port", DevServerSettings.port, path),
            players=_integer(devserver, "players", DevServerSettings.players, path),
            servers=_integer(devserver, "servers", DevServerSettings.servers, path),
            prefix=str(devserver.get("prefix", DevServerSettings.prefix)),
            seed=seed,
        ),
    )


def load_config(config_path: Path | None = None) -> DashboardConfig:
    """
    Load configuration from a TOML file.

    Args:
        config_path: Path to a TOML file. If None, uses $FLEETDASH_CONFIG or
            the bundled dashboard.toml.

    Returns:
        Loaded DashboardConfig instance.
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        config_path = Path(env_path) if env_path else CONFIG_DIR / "dashboard.toml"

    logger.debug("Loading config from %s", config_path)

    with config_path.open("rb") as f:
        data = tomllib.load(f)

    return _parse(data, config_path)


# Global cached instance (lazy loaded)
_config: DashboardConfig | None = None


def get_config() -> DashboardConfig:
    """Get the cached configuration, loading it on first use."""
    global _config

    if _config is None:
        _config = load_config()

    return _config


def reload_config(config_path: Path | None = None) -> DashboardConfig:
    """Force re-read of the configuration."""
    global _config
    _config = load_config(config_path)
    return _config
