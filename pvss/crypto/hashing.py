"""SHA-256 over ordered integers.

Every integer is hashed as its decimal string (UTF-8), one ``update`` per
value and no separators, and the digest is read back as a big-endian
unsigned integer.  Verifiers depend on this exact encoding to reproduce
Fiat-Shamir challenges.
"""

from __future__ import annotations

import hashlib


class ChallengeHasher:
    """Running SHA-256 digest that absorbs integers in order."""

    def __init__(self) -> None:
        self._digest = hashlib.sha256()

    def update(self, *values: int) -> ChallengeHasher:
        for v in values:
            self._digest.update(str(v).encode("utf-8"))
        return self

    def digest_int(self) -> int:
        return int(self._digest.hexdigest(), 16)

    def challenge(self, modulus: int) -> int:
        """Reduce the digest into ``[0, modulus)``."""
        return self.digest_int() % modulus


def hash_to_int(value: int, modulus: int | None = None) -> int:
    """``SHA256(str(value))`` as an integer, optionally reduced mod *modulus*."""
    h = ChallengeHasher().update(value).digest_int()
    return h % modulus if modulus is not None else h
