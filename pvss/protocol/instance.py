"""One PVSS scheme instance: the operations every party can run.

Verification and reconstruction need nothing but the public group
parameters and the published bundles, so any third party can run them.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from pvss.crypto import bigint, dleq
from pvss.crypto.dleq import DLEQProof
from pvss.crypto.group import GroupParameters
from pvss.crypto.hashing import ChallengeHasher, hash_to_int
from pvss.protocol.bundles import DistributionBundle, ShareBundle
from pvss.protocol.dealer import commitment_product

logger = logging.getLogger(__name__)

Fraction = Tuple[int, int]


class PVSSInstance:
    """Group parameters plus the public PVSS operations."""

    def __init__(self, params: GroupParameters) -> None:
        self.params = params

    @classmethod
    def generate(cls, bit_length: int) -> PVSSInstance:
        return cls(GroupParameters.generate(bit_length))

    @classmethod
    def default(cls) -> PVSSInstance:
        return cls(GroupParameters.rfc3526())

    def generate_private_key(self) -> int:
        return self.params.generate_private_key()

    def generate_public_key(self, private_key: int) -> int:
        return self.params.generate_public_key(private_key)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def verify_distribution(self, bundle: DistributionBundle) -> bool:
        """Check the batched DLEQ proof of a distribution bundle.

        For each public key (in bundle order) rebuild ``X_i`` from the
        commitments, recompute ``a1_i``, ``a2_i`` from the response and the
        challenge, and hash everything again.  The shares are consistent
        with one polynomial iff the hash reproduces the challenge.  The
        positions must be exactly ``1..n``.
        """
        q, g = self.params.q, self.params.g
        hasher = ChallengeHasher()

        for key in bundle.public_keys:
            position = bundle.positions.get(key)
            response = bundle.responses.get(key)
            share = bundle.shares.get(key)
            if position is None or response is None or share is None:
                logger.warning("distribution bundle lacks entries for a public key")
                return False

            x = commitment_product(bundle.commitments, position, q)
            a1, a2 = dleq.recompute_commitments(g, x, key, share, q, bundle.challenge, response)
            hasher.update(x, share, a1, a2)

        expected = list(range(1, len(bundle.public_keys) + 1))
        if sorted(bundle.positions[key] for key in bundle.public_keys) != expected:
            logger.warning("distribution bundle positions are not 1..n")
            return False

        valid = hasher.challenge(self.params.order) == bundle.challenge
        if not valid:
            logger.warning("distribution bundle challenge mismatch")
        return valid

    def verify_share(self, share_bundle: ShareBundle, encrypted_share: int) -> bool:
        """Check that *share_bundle* is the correct decryption of *encrypted_share*."""
        return dleq.verify(
            self.params.G,
            share_bundle.public_key,
            share_bundle.share,
            encrypted_share,
            self.params.q,
            share_bundle.challenge,
            share_bundle.response,
        )

    def verify_share_bundle(
        self,
        share_bundle: ShareBundle,
        distribution_bundle: DistributionBundle,
        public_key: Optional[int] = None,
    ) -> bool:
        """Like :meth:`verify_share`, looking the encrypted share up by *public_key*.

        *public_key* defaults to the key named in the share bundle.
        """
        key = share_bundle.public_key if public_key is None else public_key
        encrypted_share = distribution_bundle.shares.get(key)
        if encrypted_share is None:
            return False
        return self.verify_share(share_bundle, encrypted_share)

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def extract_share(
        self,
        distribution_bundle: DistributionBundle,
        private_key: int,
        w: Optional[int] = None,
    ) -> Optional[ShareBundle]:
        """Decrypt this key's share and prove the decryption.

        Returns ``None`` if the bundle holds no share for the key.
        """
        q = self.params.q
        public_key = self.generate_public_key(private_key)
        encrypted_share = distribution_bundle.shares.get(public_key)
        if encrypted_share is None:
            return None

        key_inverse = bigint.mod_inverse(private_key, self.params.order)
        if key_inverse is None:
            logger.warning("private key is not invertible mod q-1")
            return None
        share = bigint.mod_exp(encrypted_share, key_inverse, q)

        if w is None:
            w = bigint.random_max_width(self.params.bit_length) % q
        proof = DLEQProof.create(
            g1=self.params.G, h1=public_key, g2=share, h2=encrypted_share, q=q, alpha=private_key, w=w
        )
        challenge, response = dleq.prove(proof)

        return ShareBundle(
            public_key=public_key, share=share, challenge=challenge, response=response
        )

    # ------------------------------------------------------------------
    # Reconstruction
    # ------------------------------------------------------------------

    def reconstruct(
        self,
        share_bundles: List[ShareBundle],
        distribution_bundle: DistributionBundle,
    ) -> Optional[int]:
        """Recover the secret from at least ``threshold`` decrypted shares.

        Interpolates ``G^{p(0)} = prod S_i^{lambda_i}`` in the exponent and
        unmasks ``U``.  Returns ``None`` when there are too few shares, a
        share's key has no position, or a Lagrange coefficient cannot be
        applied because its denominator (mod q-1) or the factor (mod q) is
        not invertible.  Another subset of shares may still succeed.
        """
        threshold = distribution_bundle.threshold
        if len(share_bundles) < threshold:
            return None

        shares: Dict[int, int] = {}
        for sb in share_bundles:
            position = distribution_bundle.positions.get(sb.public_key)
            if position is None:
                logger.warning("share bundle for unknown public key")
                return None
            shares[position] = sb.share
        if len(shares) < threshold:
            return None

        q, order = self.params.q, self.params.order
        positions = list(shares)
        product = 1

        for position, share in shares.items():
            numerator, denominator = self.lagrange_coefficient(position, positions)

            if numerator % denominator == 0:
                exponent = (numerator // abs(denominator)) % order
            else:
                # proper fraction: cancel, then divide via the inverse mod q-1
                num = abs(numerator)
                den = abs(denominator)
                common = bigint.gcd(num, den)
                num //= common
                den //= common
                den_inverse = bigint.mod_inverse(den, order)
                if den_inverse is None:
                    logger.info("Lagrange denominator %d not invertible mod q-1", den)
                    return None
                exponent = (num * den_inverse) % order

            factor = bigint.mod_exp(share, exponent, q)
            if numerator * denominator < 0:
                # S^(-lambda) = 1 / S^lambda
                inverse = bigint.mod_inverse(factor, q)
                if inverse is None:
                    return None
                factor = inverse
            product = (product * factor) % q

        # sigma = H(G^{p(0)}) XOR U
        return bigint.xor(hash_to_int(product, q), distribution_bundle.U)

    def verified_shares(
        self,
        share_bundles: Iterable[ShareBundle],
        distribution_bundle: DistributionBundle,
    ) -> List[ShareBundle]:
        """The share bundles whose decryption proofs verify, in input order."""
        valid = []
        for sb in share_bundles:
            if self.verify_share_bundle(sb, distribution_bundle):
                valid.append(sb)
            else:
                logger.warning("dropping share bundle with invalid decryption proof")
        return valid

    def reconstruct_verified(
        self,
        share_bundles: Iterable[ShareBundle],
        distribution_bundle: DistributionBundle,
    ) -> Optional[int]:
        """Reconstruct using only the share bundles whose proofs verify."""
        return self.reconstruct(
            self.verified_shares(share_bundles, distribution_bundle), distribution_bundle
        )

    @staticmethod
    def lagrange_coefficient(i: int, values: Iterable[int]) -> Fraction:
        """``lambda_i = prod_{j != i} j / (j - i)`` as an exact (numerator, denominator).

        ``(0, 1)`` if *i* is not among *values*.
        """
        present = set(values)
        if i not in present:
            return 0, 1

        numerator = 1
        denominator = 1
        for j in sorted(present):
            if j != i:
                numerator *= j
                denominator *= j - i
        return numerator, denominator
