"""Application configuration loader.

Loads configuration from config/examdesk.yaml (optional) and applies
environment variable overrides on top.

Usage:
    from examdesk.config.app_config import load_app_config

    config = load_app_config()
    print(config.database.path, config.reports.mode)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to working directory)
CONFIG_FILE = Path("config/examdesk.yaml")

ReportMode = Literal["local", "remote"]


@dataclass
class DatabaseConfig:
    """SQLite settings."""

    path: Path = Path("db/examdesk.db")


@dataclass
class ServerConfig:
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class ReportsConfig:
    """PDF report settings."""

    mode: ReportMode = "local"
    service_url: str | None = None
    timeout: float = 10.0


@dataclass
class TestsConfig:
    """Defaults for test generation."""

    default_question_count: int = 10


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    reports: ReportsConfig = field(default_factory=ReportsConfig)
    tests: TestsConfig = field(default_factory=TestsConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {"path": "db/examdesk.db"},
        "server": {"host": "0.0.0.0", "port": 3000, "cors_origins": ["*"]},
        "reports": {"mode": "local", "service_url": None, "timeout": 10.0},
        "tests": {"default_question_count": 10},
    }


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base one section deep."""
    result = {key: dict(value) for key, value in base.items()}
    for section, values in (override or {}).items():
        if isinstance(values, dict) and section in result:
            result[section].update(values)
    return result


def _split_origins(value: str | list[str]) -> list[str]:
    """Parse a comma-separated CORS allow-list."""
    if isinstance(value, list):
        return [v.strip() for v in value if v.strip()]
    return [v.strip() for v in value.split(",") if v.strip()]


def _apply_env(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides."""
    env = os.environ

    if env.get("DB_PATH"):
        data["database"]["path"] = env["DB_PATH"]
    if env.get("PORT"):
        data["server"]["port"] = int(env["PORT"])
    if env.get("CORS_ORIGINS"):
        data["server"]["cors_origins"] = env["CORS_ORIGINS"]
    if env.get("REPORT_MODE"):
        data["reports"]["mode"] = env["REPORT_MODE"]
    if env.get("REPORT_SERVICE_URL"):
        data["reports"]["service_url"] = env["REPORT_SERVICE_URL"]
    if env.get("REPORT_TIMEOUT"):
        data["reports"]["timeout"] = float(env["REPORT_TIMEOUT"])

    return data


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    reports = data["reports"]
    mode = reports.get("mode", "local")
    if mode not in ("local", "remote"):
        raise ValueError(f"Unknown report mode: {mode!r} (expected 'local' or 'remote')")
    if mode == "remote" and not reports.get("service_url"):
        raise ValueError("Report mode 'remote' requires a report service URL")

    return AppConfig(
        database=DatabaseConfig(path=Path(data["database"]["path"])),
        server=ServerConfig(
            host=data["server"].get("host", "0.0.0.0"),
            port=int(data["server"].get("port", 3000)),
            cors_origins=_split_origins(data["server"].get("cors_origins", ["*"])),
        ),
        reports=ReportsConfig(
            mode=mode,
            service_url=(reports.get("service_url") or "").rstrip("/") or None,
            timeout=float(reports.get("timeout", 10.0)),
        ),
        tests=TestsConfig(
            default_question_count=int(data["tests"].get("default_question_count", 10)),
        ),
    )


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data = _get_defaults()

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        file_data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
        data = _merge(data, file_data)
    else:
        logger.debug("using_default_config")

    _cached_config = _parse_config(_apply_env(data))
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
