from __future__ import annotations

import base64
import binascii
import logging
from typing import Dict, Type

from .ed25519 import Ed25519Keypair
from .keypair import Keypair, KeyDerivationError, SCHEME_FLAG_LENGTH, SIGNATURE_SCHEME_TO_FLAG
from .secp256k1 import Secp256k1Keypair

logger = logging.getLogger(__name__)

KEYPAIR_CURVES: Dict[str, Type[Keypair]] = {
    "ed25519": Ed25519Keypair,
    "secp256k1": Secp256k1Keypair,
}


def keypair_class(curve: str) -> Type[Keypair]:
    if not isinstance(curve, str) or curve.lower() not in KEYPAIR_CURVES:
        raise KeyDerivationError(f"Unsupported curve {curve!r}, expected one of {list(KEYPAIR_CURVES)}")
    return KEYPAIR_CURVES[curve.lower()]


def decode_private_key(encoded_private_key: str) -> bytes:
    if not isinstance(encoded_private_key, str):
        raise KeyDerivationError("Private key must be a base64 string")
    try:
        return base64.b64decode(encoded_private_key.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyDerivationError(f"Private key is not valid base64: {e}") from e


def derive_keypair(curve: str, encoded_private_key: str) -> Keypair:
    """
    Build a keypair from an exported private key.

    The decoded bytes are ``scheme flag || secret key``. The flag must belong to
    ``curve`` and is dropped before the secret key is constructed.
    """
    cls = keypair_class(curve)
    data = decode_private_key(encoded_private_key)
    expected_length = SCHEME_FLAG_LENGTH + cls.SECRET_KEY_LENGTH
    if len(data) != expected_length:
        raise KeyDerivationError(
            f"Encoded {cls.SCHEME} key must decode to {expected_length} bytes "
            f"(1 scheme flag + {cls.SECRET_KEY_LENGTH} secret), got {len(data)}")
    flag = data[0]
    expected_flag = SIGNATURE_SCHEME_TO_FLAG[cls.SCHEME]
    if flag != expected_flag:
        raise KeyDerivationError(
            f"Scheme flag {flag} does not match {cls.SCHEME} (flag {expected_flag})")
    return cls.from_secret_key(data[SCHEME_FLAG_LENGTH:])


def load_keypair(config) -> Keypair:
    """Keypair for the configured signer: exported key first, then mnemonic."""
    if config.private_key is not None:
        keypair = derive_keypair(config.key_scheme, config.private_key)
    else:
        if keypair_class(config.key_scheme) is not Ed25519Keypair:
            raise KeyDerivationError("Mnemonic derivation only supports ed25519")
        keypair = Ed25519Keypair.from_mnemonic(config.mnemonic)
    logger.info(f"Active account address:{keypair.sui_address()}")
    return keypair
