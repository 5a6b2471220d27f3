"""Arbitrary-precision integer helpers.

Thin adapter over Python ints: modular arithmetic, primality, randomness
and big-endian serialization of secret payloads.
"""

from __future__ import annotations

import math
import secrets
from typing import Optional

from sympy import isprime


def mod_exp(base: int, exponent: int, modulus: int) -> int:
    """``base^exponent mod modulus`` for a non-negative exponent."""
    return pow(base, exponent, modulus)


def mod_inverse(a: int, modulus: int) -> Optional[int]:
    """Multiplicative inverse of *a* mod *modulus*, or ``None`` if it does not exist."""
    if modulus <= 1 or math.gcd(a % modulus, modulus) != 1:
        return None
    return pow(a, -1, modulus)


def gcd(a: int, b: int) -> int:
    return math.gcd(a, b)


def is_probable_prime(n: int) -> bool:
    """Primality test (sympy: trial division, Miller-Rabin, strong Lucas)."""
    return bool(isprime(n))


def xor(a: int, b: int) -> int:
    return a ^ b


# ---------------------------------------------------------------------------
# Randomness (CSPRNG)
# ---------------------------------------------------------------------------


def random_below(limit: int) -> int:
    """Uniform integer in ``[0, limit)``."""
    return secrets.randbelow(limit)


def random_max_width(bits: int) -> int:
    """Uniform integer in ``[0, 2^bits)``."""
    return secrets.randbits(bits)


def random_exact_width(bits: int) -> int:
    """Uniform integer with exactly *bits* bits (top bit set)."""
    if bits < 1:
        raise ValueError(f"Invalid bit width: {bits}")
    return secrets.randbits(bits - 1) | (1 << (bits - 1))


# ---------------------------------------------------------------------------
# Serialization of secret payloads
# ---------------------------------------------------------------------------


def int_to_bytes(n: int) -> bytes:
    """Big-endian, minimal-length encoding (``0`` encodes to ``b""``)."""
    if n < 0:
        raise ValueError("Cannot serialize a negative integer")
    return n.to_bytes((n.bit_length() + 7) // 8, "big")


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, "big")


def text_to_int(text: str) -> int:
    """Embed a UTF-8 message as an integer secret."""
    return bytes_to_int(text.encode("utf-8"))


def int_to_text(n: int) -> str:
    return int_to_bytes(n).decode("utf-8")
