"""
PeerSwap TOML Configuration Loader

Loads config.toml at startup with environment variable overrides.

Environment variable mapping:
    [engine] chain_id        → PEERSWAP_CHAIN_ID
    [engine] address         → PEERSWAP_ENGINE_ADDRESS
    [engine] domain_name     → PEERSWAP_DOMAIN_NAME
    [engine] domain_version  → PEERSWAP_DOMAIN_VERSION
    [database.sqlite] path   → PEERSWAP_DATABASE_PATH
    [logging] level          → PEERSWAP_LOG_LEVEL

Keys never belong in TOML; signing commands take them from the environment.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import PEERSWAP_DATABASE_PATH, PEERSWAP_DOMAIN_NAME, PEERSWAP_DOMAIN_VERSION
from ..crypto.address import is_valid_address, is_zero_address, normalize_address
from ..exceptions import ConfigurationError
from ..logger import get_logger

logger = get_logger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ---------------------------------------------------------------------------
# Subsection dataclasses
# ---------------------------------------------------------------------------


@dataclass
class EngineSectionConfig:
    """[engine] section: the signing domain of one deployment."""
    chain_id: int = 1
    address: str = ""
    domain_name: str = str(PEERSWAP_DOMAIN_NAME)
    domain_version: str = str(PEERSWAP_DOMAIN_VERSION)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineSectionConfig":
        return cls(
            chain_id=data.get("chain_id", 1),
            address=data.get("address", ""),
            domain_name=data.get("domain_name", str(PEERSWAP_DOMAIN_NAME)),
            domain_version=data.get("domain_version", str(PEERSWAP_DOMAIN_VERSION)),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := os.environ.get("PEERSWAP_CHAIN_ID"):
            self.chain_id = int(v)
        if v := os.environ.get("PEERSWAP_ENGINE_ADDRESS"):
            self.address = v
        if v := os.environ.get("PEERSWAP_DOMAIN_NAME"):
            self.domain_name = v
        if v := os.environ.get("PEERSWAP_DOMAIN_VERSION"):
            self.domain_version = v

    def validate(self) -> None:
        if self.chain_id < 1:
            raise ConfigurationError("chain_id must be >= 1")
        if not self.address or not is_valid_address(self.address):
            raise ConfigurationError(f"Invalid engine address: {self.address!r}")
        if is_zero_address(self.address):
            raise ConfigurationError("Engine address cannot be the zero address")
        if not self.domain_name:
            raise ConfigurationError("domain_name cannot be empty")
        self.address = normalize_address(self.address)


# -- Database -----------------------------------------------------------

@dataclass
class SQLiteConfig:
    """[database.sqlite]."""
    path: str = str(PEERSWAP_DATABASE_PATH)
    wal_mode: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SQLiteConfig":
        return cls(
            path=data.get("path", str(PEERSWAP_DATABASE_PATH)),
            wal_mode=data.get("wal_mode", True),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("PEERSWAP_DATABASE_PATH"):
            self.path = v


@dataclass
class DatabaseConfig:
    """[database] section."""
    type: str = "sqlite"
    sqlite: SQLiteConfig = field(default_factory=SQLiteConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DatabaseConfig":
        return cls(
            type=data.get("type", "sqlite"),
            sqlite=SQLiteConfig.from_dict(data.get("sqlite", {})),
        )

    def apply_env(self) -> None:
        self.sqlite.apply_env()


# -- Logging ------------------------------------------------------------

@dataclass
class LoggingConfig:
    """[logging] section."""
    level: str = "INFO"
    file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        return cls(
            level=str(data.get("level", "INFO")).upper(),
            file=data.get("file"),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("PEERSWAP_LOG_LEVEL"):
            self.level = v.upper()


# -----------------------------------------------------------------------
# Top-level config
# -----------------------------------------------------------------------

@dataclass
class PeerSwapConfig:
    """
    Unified PeerSwap configuration.

    Loads every section of config.toml and applies environment variable
    overrides.  This is the single source of truth at runtime.
    """
    engine: EngineSectionConfig = field(default_factory=EngineSectionConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # --- factories --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PeerSwapConfig":
        """Create PeerSwapConfig from a parsed TOML dict."""
        return cls(
            engine=EngineSectionConfig.from_dict(data.get("engine", {})),
            database=DatabaseConfig.from_dict(data.get("database", {})),
            logging=LoggingConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "PeerSwapConfig":
        """
        Load configuration from a TOML file.

        A missing file is not an error: defaults plus environment overrides
        are returned instead.
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning(f"Config file not found: {config_path}, using defaults")
            cfg = cls()
            cfg.apply_env()
            return cfg

        try:
            with open(path, "rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Malformed config file {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    # --- env overrides ----------------------------------------------------

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.engine.apply_env()
        self.database.apply_env()
        self.logging.apply_env()

    # --- validation -------------------------------------------------------

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Raises:
            ConfigurationError: on invalid config
        """
        self.engine.validate()
        if self.database.type != "sqlite":
            raise ConfigurationError("Only 'sqlite' database type is supported")
        if self.logging.level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log level: {self.logging.level}")
        return True

    # --- serialisation ----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics, NOT for re-creating TOML)."""
        return {
            "engine": {
                "chain_id": self.engine.chain_id,
                "address": self.engine.address,
                "domain_name": self.engine.domain_name,
                "domain_version": self.engine.domain_version,
            },
            "database": {
                "type": self.database.type,
                "sqlite": {
                    "path": self.database.sqlite.path,
                    "wal_mode": self.database.sqlite.wal_mode,
                },
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }


# -----------------------------------------------------------------------
# Convenience function
# -----------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> PeerSwapConfig:
    """
    Load PeerSwap configuration.

    Resolution order:
        1. Explicit *path* argument
        2. PEERSWAP_CONFIG env var
        3. ./config.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("PEERSWAP_CONFIG", "config.toml")

    return PeerSwapConfig.from_file(path)
