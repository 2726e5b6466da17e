import base64
import hashlib


def judge_hex_str(data: str) -> bool:
    if "0x" == data[:2]:
        data = data[2:]
    if not data:
        return False
    for k in data:
        if "0" <= k <= "9" or "a" <= k <= "f" or "A" <= k <= "F":
            continue
        return False
    return True


def blake2b_256(data: bytes) -> bytes:
    hasher = hashlib.blake2b(digest_size=32)
    hasher.update(data)
    return hasher.digest()


def to_base64(data) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")
