"""
Arithmetic and stream cipher primitives shared by server and client.

These are deliberately toy strength: a 64-bit Diffie-Hellman group and an
LCG keystream that restarts from the shared secret for every message.
"""
from typing import Union

from config import LCG_MULTIPLIER, LCG_INCREMENT, LCG_MODULUS_BITS, KEYSTREAM_SHIFT, TEXT_ENCODING

_LCG_MASK = (1 << LCG_MODULUS_BITS) - 1


def mod_exp(base: int, exponent: int, modulus: int) -> int:
    """Square-and-multiply ``base ** exponent % modulus``."""
    result = 1
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        exponent >>= 1
        base = (base * base) % modulus
    return result


class LCG:
    """Linear congruential generator emitting one keystream byte per step."""

    def __init__(self, seed: int):
        self.state = seed & _LCG_MASK

    def next_byte(self) -> int:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) & _LCG_MASK
        return (self.state >> KEYSTREAM_SHIFT) & 0xFF


def generate_keystream(seed: int, length: int) -> bytes:
    # A fresh generator every call: equal-length messages share a keystream.
    rng = LCG(seed)
    return bytes(rng.next_byte() for _ in range(length))


def xor_transform(data: Union[str, bytes], keystream: bytes) -> bytes:
    if isinstance(data, str):
        data = data.encode(TEXT_ENCODING)
    if len(keystream) < len(data):
        raise ValueError(f"keystream too short: {len(keystream)} < {len(data)}")
    return bytes(d ^ k for d, k in zip(data, keystream))


def hex_preview(data: bytes, limit: int = 4) -> str:
    shown = " ".join(f"{b:02x}" for b in data[:limit])
    return shown + (" ..." if len(data) > limit else "")
