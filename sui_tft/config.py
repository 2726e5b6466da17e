from __future__ import annotations

import functools
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml
from dotenv import dotenv_values

from .utils import judge_hex_str

NETWORKS_FILE = Path(__file__).parent.joinpath("networks.yaml")

DEFAULT_NETWORK = "testnet"
DEFAULT_KEY_SCHEME = "ed25519"
DEFAULT_GAS_BUDGET = 100000000
DEFAULT_TIMEOUT = 30


class ConfigError(ValueError):
    """Missing or invalid configuration, raised before any network access."""


@functools.lru_cache()
def load_networks() -> Dict[str, dict]:
    with NETWORKS_FILE.open() as fp:
        data = yaml.safe_load(fp)
    if not isinstance(data, dict) or "networks" not in data:
        raise ConfigError(f"networks not found in {NETWORKS_FILE}")
    return data["networks"]


def get_fullnode_url(network: str) -> str:
    networks = load_networks()
    if network not in networks:
        raise ConfigError(f"Unknown network {network!r}, expected one of {list(networks)}")
    node_url = networks[network].get("node_url")
    if not node_url:
        raise ConfigError(f"node_url not configured for {network}")
    return node_url


def _int_value(env: Mapping, name: str, default: int) -> int:
    value = env.get(name)
    if value is None or value == "":
        return default
    try:
        result = int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if result <= 0:
        raise ConfigError(f"{name} must be positive, got {result}")
    return result


class Config:
    """
    Process configuration, read once at start and passed to the entry point.

    Environment variables:
        ADMIN_PRIVATE_KEY / PRIVATE_KEY: base64 ``scheme flag || secret key``
        MNEMONIC: seed phrase, used when no private key is set (ed25519)
        PACKAGE_ID: published package holding the ``tft`` module
        SUI_NETWORK: mainnet | testnet | devnet | localnet
        SUI_NODE_URL: overrides the network's node url
        KEY_SCHEME: ed25519 | secp256k1
        GAS_BUDGET, SUI_RPC_TIMEOUT
    """

    def __init__(
            self,
            package_id: str,
            private_key: Optional[str] = None,
            mnemonic: Optional[str] = None,
            network: str = DEFAULT_NETWORK,
            node_url: Optional[str] = None,
            key_scheme: str = DEFAULT_KEY_SCHEME,
            gas_budget: int = DEFAULT_GAS_BUDGET,
            timeout: int = DEFAULT_TIMEOUT,
    ):
        if private_key is None and mnemonic is None:
            raise ConfigError("ADMIN_PRIVATE_KEY or PRIVATE_KEY env not exist")
        if not package_id:
            raise ConfigError("PACKAGE_ID env not exist")
        if not package_id.startswith("0x") or not judge_hex_str(package_id):
            raise ConfigError(f"PACKAGE_ID must be a 0x hex id, got {package_id!r}")
        self.package_id = package_id
        self.private_key = private_key
        self.mnemonic = mnemonic
        self.network = network
        self.node_url = node_url if node_url else get_fullnode_url(network)
        self.key_scheme = key_scheme
        self.gas_budget = gas_budget
        self.timeout = timeout

    def __repr__(self):
        # Never print key material.
        return f"Config(package_id={self.package_id}, network={self.network}, node_url={self.node_url}, " \
               f"key_scheme={self.key_scheme}, gas_budget={self.gas_budget})"

    @classmethod
    def from_mapping(cls, env: Mapping) -> Config:
        return cls(
            package_id=env.get("PACKAGE_ID"),
            private_key=env.get("ADMIN_PRIVATE_KEY") or env.get("PRIVATE_KEY") or None,
            mnemonic=env.get("MNEMONIC") or None,
            network=env.get("SUI_NETWORK") or DEFAULT_NETWORK,
            node_url=env.get("SUI_NODE_URL") or None,
            key_scheme=env.get("KEY_SCHEME") or DEFAULT_KEY_SCHEME,
            gas_budget=_int_value(env, "GAS_BUDGET", DEFAULT_GAS_BUDGET),
            timeout=_int_value(env, "SUI_RPC_TIMEOUT", DEFAULT_TIMEOUT),
        )

    @classmethod
    def from_env(cls, env_file: Union[Path, str] = ".env") -> Config:
        """Values from ``env_file`` overridden by the process environment"""
        env = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
        env.update(os.environ)
        return cls.from_mapping(env)
