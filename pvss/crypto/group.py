"""Group parameters for the PVSS scheme.

``q`` is a safe prime (``q`` and ``(q-1)/2`` both prime).  Exponents live
modulo the group order ``q - 1``.  ``g = (q-1)/2`` is the generator used for
polynomial commitments, ``G = 2`` the generator used for keys and for
masking the secret.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, PositiveInt

from pvss import config
from pvss.crypto import bigint

logger = logging.getLogger(__name__)

MIN_BIT_LENGTH = 8


class GroupParameters(BaseModel):
    """Immutable scheme parameters shared by every participant."""

    model_config = ConfigDict(frozen=True)

    q: PositiveInt
    g: PositiveInt
    G: PositiveInt
    bit_length: PositiveInt

    @property
    def order(self) -> int:
        """Modulus for exponents (``q - 1``)."""
        return self.q - 1

    # ---- construction ----

    @classmethod
    def generate(cls, bit_length: int) -> GroupParameters:
        """Search for a safe prime of exactly *bit_length* bits.

        Starting from a random odd candidate of full width, walk downwards
        in steps of two until ``q`` and ``(q-1)/2`` are prime and
        ``g = (q-1)/2`` lies in the subgroup of quadratic residues
        (``g^((q-1)/2) = 1 mod q``).  A candidate that loses its top bit
        restarts the walk from a fresh random start.

        The residue condition means ``q = 3 mod 8``, which in turn makes
        ``G = 2`` a non-residue of full order ``q - 1``.
        """
        if bit_length < MIN_BIT_LENGTH:
            raise ValueError(f"bit_length must be >= {MIN_BIT_LENGTH}, got {bit_length}")

        floor = 1 << (bit_length - 1)
        q = bigint.random_exact_width(bit_length) | 1
        for _ in range(config.SAFE_PRIME_MAX_CANDIDATES):
            q -= 2
            if q < floor:
                q = bigint.random_exact_width(bit_length) | 1
                continue
            if not bigint.is_probable_prime(q):
                continue
            sophie_germain = (q - 1) // 2
            if not bigint.is_probable_prime(sophie_germain):
                continue
            if pow(sophie_germain, sophie_germain, q) != 1:
                continue
            logger.debug("found %d-bit safe prime", bit_length)
            return cls(q=q, g=sophie_germain, G=config.DEFAULT_GENERATOR, bit_length=bit_length)

        raise RuntimeError(
            f"No {bit_length}-bit safe prime found after "
            f"{config.SAFE_PRIME_MAX_CANDIDATES} candidates"
        )

    @classmethod
    def rfc3526(cls) -> GroupParameters:
        """Precomputed 2048-bit safe prime (RFC 3526, group 14)."""
        q = config.RFC3526_PRIME
        return cls(
            q=q,
            g=(q - 1) // 2,
            G=config.DEFAULT_GENERATOR,
            bit_length=config.RFC3526_BIT_LENGTH,
        )

    # ---- keys ----

    def generate_private_key(self) -> int:
        """Uniform key in ``[0, q)`` that is invertible mod ``q - 1``.

        Invertibility is needed to decrypt shares (``Y^(1/x)``).
        """
        key = bigint.random_below(self.q)
        while bigint.gcd(key, self.order) != 1:
            key = bigint.random_below(self.q)
        return key

    def generate_public_key(self, private_key: int) -> int:
        return bigint.mod_exp(self.G, private_key, self.q)
