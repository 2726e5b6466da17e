import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sui_tft import Config, ConfigError, get_fullnode_url

PACKAGE_ID = "0x" + "ab" * 32


class TestConfig(unittest.TestCase):

    def test_fullnode_url(self):
        assert get_fullnode_url("testnet") == "https://fullnode.testnet.sui.io:443"
        assert get_fullnode_url("localnet") == "http://127.0.0.1:9000"
        with self.assertRaises(ConfigError):
            get_fullnode_url("sui-moon")

    def test_defaults(self):
        config = Config.from_mapping({"PACKAGE_ID": PACKAGE_ID, "PRIVATE_KEY": "s3cr3t-admin-key"})
        assert config.private_key == "s3cr3t-admin-key"
        assert config.network == "testnet"
        assert config.node_url == get_fullnode_url("testnet")
        assert config.key_scheme == "ed25519"
        assert config.gas_budget == 100000000
        assert config.timeout == 30
        assert "s3cr3t-admin-key" not in repr(config)

    def test_admin_key_first(self):
        config = Config.from_mapping({
            "PACKAGE_ID": PACKAGE_ID,
            "PRIVATE_KEY": "user",
            "ADMIN_PRIVATE_KEY": "admin",
            "SUI_NETWORK": "devnet",
            "SUI_NODE_URL": "http://127.0.0.1:9124",
            "GAS_BUDGET": "5000",
        })
        assert config.private_key == "admin"
        assert config.network == "devnet"
        assert config.node_url == "http://127.0.0.1:9124"
        assert config.gas_budget == 5000

    def test_invalid(self):
        for env in [
            {"PRIVATE_KEY": "key"},
            {"PACKAGE_ID": PACKAGE_ID},
            {"PACKAGE_ID": "tft", "PRIVATE_KEY": "key"},
            {"PACKAGE_ID": PACKAGE_ID, "PRIVATE_KEY": "key", "SUI_NETWORK": "sui-moon"},
            {"PACKAGE_ID": PACKAGE_ID, "PRIVATE_KEY": "key", "GAS_BUDGET": "lots"},
            {"PACKAGE_ID": PACKAGE_ID, "PRIVATE_KEY": "key", "SUI_RPC_TIMEOUT": "0"},
        ]:
            with self.assertRaises(ConfigError):
                Config.from_mapping(env)

    def test_from_env_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            env_file = Path(tmp).joinpath(".env")
            env_file.write_text(f"PACKAGE_ID={PACKAGE_ID}\nPRIVATE_KEY=from-file\nSUI_NETWORK=mainnet\n")
            with mock.patch.dict(os.environ, {"SUI_NETWORK": "devnet"}, clear=True):
                config = Config.from_env(env_file)
        assert config.package_id == PACKAGE_ID
        assert config.private_key == "from-file"
        assert config.network == "devnet"

    def test_missing_env_file(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigError):
                Config.from_env("/nonexistent/.env")
