from __future__ import annotations

from .bcs import Intent
from .utils import blake2b_256, to_base64

SIGNATURE_SCHEME_TO_FLAG = {
    "ED25519": 0,
    "Secp256k1": 1
}

# Exported keys are ``flag || secret key``; the flag names the signature scheme.
SCHEME_FLAG_LENGTH = 1


class KeyDerivationError(ValueError):
    """Raised when private key material cannot produce a keypair."""


class Keypair:
    """
    A private/public key pair for one signature scheme.

    Subclasses provide the curve specific parts; addresses, key export and
    transaction signatures follow the Sui conventions and are shared.
    """

    SCHEME: str = ""
    SECRET_KEY_LENGTH: int = 32

    @property
    def flag(self) -> int:
        return SIGNATURE_SCHEME_TO_FLAG[self.SCHEME]

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> Keypair:
        raise NotImplementedError

    def secret_key(self) -> bytes:
        raise NotImplementedError

    def public_key(self) -> bytes:
        raise NotImplementedError

    def sign(self, data: bytes) -> bytes:
        raise NotImplementedError

    def verify(self, data: bytes, signature: bytes) -> bool:
        raise NotImplementedError

    def __eq__(self, other):
        return type(self) is type(other) and self.secret_key() == other.secret_key()

    def __hash__(self):
        return hash((self.SCHEME, self.public_key()))

    def __repr__(self):
        return f"{type(self).__name__}({self.sui_address()})"

    def sui_address(self) -> str:
        return "0x" + blake2b_256(bytes([self.flag]) + self.public_key()).hex()

    def export_private_key(self) -> str:
        """Sui keystore encoding, base64 of ``flag || secret key``"""
        return to_base64(bytes([self.flag]) + self.secret_key())

    def public_key_base64(self) -> str:
        return to_base64(bytes([self.flag]) + self.public_key())

    def sign_transaction(self, tx_bytes: bytes) -> str:
        """
        Sign BCS encoded TransactionData.

        :return: base64 of ``flag || signature || public key``
        """
        msg = Intent.transaction_data().encode + bytes(tx_bytes)
        signature = self.sign(blake2b_256(msg))
        return to_base64(bytes([self.flag]) + signature + self.public_key())
