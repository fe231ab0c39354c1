"""Configuration package for examdesk."""

from examdesk.config.app_config import (
    AppConfig,
    DatabaseConfig,
    ReportsConfig,
    ServerConfig,
    TestsConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "ReportsConfig",
    "ServerConfig",
    "TestsConfig",
    "clear_config_cache",
    "load_app_config",
]
