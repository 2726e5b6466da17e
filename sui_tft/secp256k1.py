from __future__ import annotations

import hashlib

from ecdsa import BadSignatureError, SECP256k1, SigningKey
from ecdsa.util import sigdecode_string, sigencode_string_canonize

from .keypair import Keypair, KeyDerivationError


class Secp256k1Keypair(Keypair):
    """
    ECDSA over secp256k1.

    Signatures are 64 byte ``r || s`` with low s, computed over the SHA-256
    of the message (RFC 6979 nonces). Public keys are 33 byte compressed points.
    """

    SCHEME = "Secp256k1"

    key: SigningKey

    def __init__(self, key: SigningKey):
        self.key = key

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> Secp256k1Keypair:
        if len(secret_key) != cls.SECRET_KEY_LENGTH:
            raise KeyDerivationError(
                f"Secp256k1 secret key must be {cls.SECRET_KEY_LENGTH} bytes, got {len(secret_key)}")
        secexp = int.from_bytes(secret_key, "big")
        if not 1 <= secexp < SECP256k1.order:
            raise KeyDerivationError("Secp256k1 secret key out of curve range")
        return cls(SigningKey.from_string(bytes(secret_key), curve=SECP256k1, hashfunc=hashlib.sha256))

    @staticmethod
    def generate() -> Secp256k1Keypair:
        return Secp256k1Keypair(SigningKey.generate(curve=SECP256k1, hashfunc=hashlib.sha256))

    def secret_key(self) -> bytes:
        return self.key.to_string()

    def public_key(self) -> bytes:
        return self.key.get_verifying_key().to_string("compressed")

    def sign(self, data: bytes) -> bytes:
        return self.key.sign_deterministic(data, hashfunc=hashlib.sha256, sigencode=sigencode_string_canonize)

    def verify(self, data: bytes, signature: bytes) -> bool:
        try:
            return self.key.get_verifying_key().verify(
                signature, data, hashfunc=hashlib.sha256, sigdecode=sigdecode_string)
        except BadSignatureError:
            return False
