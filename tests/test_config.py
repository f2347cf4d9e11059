"""
Configuration loader tests: TOML parsing, env overrides and validation.
"""

import pytest

from peerswap.config import PeerSwapConfig, load_config
from peerswap.crypto import is_checksum_address
from peerswap.exceptions import ConfigurationError

ENGINE = "0x" + "11" * 20

CONFIG_TOML = f"""
[engine]
chain_id = 137
address = "{ENGINE}"
domain_name = "PeerSwap"
domain_version = "1"

[database]
type = "sqlite"

[database.sqlite]
path = "data/test.db"
wal_mode = false

[logging]
level = "debug"
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PEERSWAP_CONFIG", "PEERSWAP_CHAIN_ID", "PEERSWAP_ENGINE_ADDRESS",
                 "PEERSWAP_DOMAIN_NAME", "PEERSWAP_DOMAIN_VERSION",
                 "PEERSWAP_DATABASE_PATH", "PEERSWAP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML)
    return path


class TestLoadConfig:

    def test_from_file(self, config_file):
        config = load_config(str(config_file))
        assert config.engine.chain_id == 137
        assert config.engine.address == ENGINE
        assert config.database.sqlite.path == "data/test.db"
        assert config.database.sqlite.wal_mode is False
        assert config.logging.level == "DEBUG"
        assert config.validate() is True

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "absent.toml"))
        assert config.engine.chain_id == 1
        assert config.database.type == "sqlite"

    def test_path_from_env(self, config_file, monkeypatch):
        monkeypatch.setenv("PEERSWAP_CONFIG", str(config_file))
        assert load_config().engine.chain_id == 137

    def test_env_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("PEERSWAP_CHAIN_ID", "10")
        monkeypatch.setenv("PEERSWAP_DATABASE_PATH", "/tmp/other.db")
        monkeypatch.setenv("PEERSWAP_LOG_LEVEL", "warning")
        config = load_config(str(config_file))
        assert config.engine.chain_id == 10
        assert config.database.sqlite.path == "/tmp/other.db"
        assert config.logging.level == "WARNING"

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[engine\nchain_id = ")
        with pytest.raises(ConfigurationError, match="Malformed"):
            load_config(str(path))

    def test_to_dict(self, config_file):
        data = load_config(str(config_file)).to_dict()
        assert data["engine"]["chain_id"] == 137
        assert data["database"]["sqlite"]["wal_mode"] is False


class TestValidation:

    def test_engine_address_required(self):
        with pytest.raises(ConfigurationError, match="engine address"):
            PeerSwapConfig().validate()

    def test_zero_address_rejected(self):
        config = PeerSwapConfig()
        config.engine.address = "0x" + "00" * 20
        with pytest.raises(ConfigurationError, match="zero address"):
            config.validate()

    def test_chain_id_positive(self):
        config = PeerSwapConfig()
        config.engine.address = ENGINE
        config.engine.chain_id = 0
        with pytest.raises(ConfigurationError, match="chain_id"):
            config.validate()

    def test_database_type(self):
        config = PeerSwapConfig.from_dict({"engine": {"address": ENGINE}, "database": {"type": "postgres"}})
        with pytest.raises(ConfigurationError, match="sqlite"):
            config.validate()

    def test_log_level(self):
        config = PeerSwapConfig.from_dict({"engine": {"address": ENGINE}, "logging": {"level": "LOUD"}})
        with pytest.raises(ConfigurationError, match="log level"):
            config.validate()

    def test_address_normalized(self):
        config = PeerSwapConfig.from_dict({"engine": {"address": "0x" + "ab" * 20}})
        config.validate()
        assert is_checksum_address(config.engine.address)
        assert config.engine.address.lower() == "0x" + "ab" * 20
