"""
PeerSwap Configuration

Loads config.toml at startup.
Environment variables override TOML values.
"""

from .loader import (
    PeerSwapConfig,
    EngineSectionConfig,
    DatabaseConfig,
    SQLiteConfig,
    LoggingConfig,
    load_config,
)

__all__ = [
    "PeerSwapConfig",
    "EngineSectionConfig",
    "DatabaseConfig",
    "SQLiteConfig",
    "LoggingConfig",
    "load_config",
]
