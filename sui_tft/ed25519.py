# Copyright (c) Aptos
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import hashlib
import hmac
from typing import List

from mnemonic import Mnemonic
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey

from .keypair import Keypair, KeyDerivationError

DEFAULT_ED25519_DERIVATION_PATH = "m/44'/784'/0'/0'/0'"
ED25519_SEED = b"ed25519 seed"
HARDENED_OFFSET = 0x80000000


def format_path(path: str) -> List[int]:
    """m/44'/784'/0'/0'/0' -> [44, 784, 0, 0, 0]; every level must be hardened."""
    levels = path.split("/")
    if levels[0] != "m":
        raise KeyDerivationError(f"Derivation path must start with 'm': {path}")
    result = []
    for k in levels[1:]:
        if not k.endswith("'"):
            raise KeyDerivationError(f"Ed25519 only supports hardened derivation: {path}")
        try:
            result.append(int(k[:-1]))
        except ValueError:
            raise KeyDerivationError(f"Invalid derivation path: {path}")
    return result


class Ed25519Keypair(Keypair):
    SCHEME = "ED25519"

    key: SigningKey

    def __init__(self, key: SigningKey):
        self.key = key

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> Ed25519Keypair:
        if len(secret_key) != cls.SECRET_KEY_LENGTH:
            raise KeyDerivationError(
                f"Ed25519 secret key must be {cls.SECRET_KEY_LENGTH} bytes, got {len(secret_key)}")
        return cls(SigningKey(bytes(secret_key)))

    @classmethod
    def from_mnemonic(cls, mnemonic: str, path=DEFAULT_ED25519_DERIVATION_PATH) -> Ed25519Keypair:
        """SLIP-0010 derivation from a BIP-39 seed phrase"""
        if not isinstance(mnemonic, str) or len(mnemonic.split()) not in (12, 15, 18, 21, 24):
            raise KeyDerivationError("Mnemonic must have 12, 15, 18, 21 or 24 words")
        return cls.from_seed(Mnemonic.to_seed(mnemonic, passphrase=""), path)

    @classmethod
    def from_seed(cls, seed, path=DEFAULT_ED25519_DERIVATION_PATH) -> Ed25519Keypair:
        """SLIP-0010 derivation from a raw seed, as bytes or hex"""
        if isinstance(seed, str):
            try:
                seed = bytes.fromhex(seed[2:] if seed.startswith("0x") else seed)
            except ValueError:
                raise KeyDerivationError("Seed is not valid hex")
        if not 16 <= len(seed) <= 64:
            raise KeyDerivationError(f"Seed must be 16 to 64 bytes, got {len(seed)}")
        mast_info = hmac.new(ED25519_SEED, bytes(seed), hashlib.sha512).digest()
        key = mast_info[:32]
        chain_code = mast_info[32:]
        for i in format_path(path):
            index_buffer = (i + HARDENED_OFFSET).to_bytes(4, "big")
            data = bytes([0]) + key + index_buffer
            info = hmac.new(chain_code, data, hashlib.sha512).digest()
            key = info[:32]
            chain_code = info[32:]
        return cls.from_secret_key(key)

    @staticmethod
    def generate() -> Ed25519Keypair:
        return Ed25519Keypair(SigningKey.generate())

    def secret_key(self) -> bytes:
        return self.key.encode()

    def public_key(self) -> bytes:
        return self.key.verify_key.encode()

    def sign(self, data: bytes) -> bytes:
        return self.key.sign(data).signature

    def verify(self, data: bytes, signature: bytes) -> bool:
        try:
            self.key.verify_key.verify(data, signature)
        except (BadSignatureError, ValueError):
            return False
        return True
