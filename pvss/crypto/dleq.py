"""Chaum-Pedersen proof of discrete-log equality (DLEQ).

Proves knowledge of ``alpha`` with ``h1 = g1^alpha`` and ``h2 = g2^alpha``
(mod q) without revealing it.

Protocol, made non-interactive with Fiat-Shamir:

1. Prover picks a fresh nonce ``w`` and commits to
   ``a1 = g1^w``, ``a2 = g2^w``.
2. The challenge ``c`` is a hash over the transcript ``(h1, h2, a1, a2)``
   (for a batch: the transcripts of all proofs, in order), mod ``q - 1``.
3. Response ``r = (w - alpha * c) mod (q - 1)``.  The exponent group order
   is ``q - 1``, not ``q``.
4. Verifier recomputes ``a1 = g1^r * h1^c`` and ``a2 = g2^r * h2^c`` and
   checks that hashing them reproduces ``c``.

A ``DLEQProof`` is the immutable commitment phase; ``response(c)`` is the
pure second phase.  Never answer two different challenges with the same
nonce: that reveals ``alpha``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from pvss.crypto import bigint
from pvss.crypto.hashing import ChallengeHasher


@dataclass(frozen=True)
class DLEQProof:
    g1: int
    h1: int
    g2: int
    h2: int
    q: int
    alpha: int = field(repr=False)
    w: int = field(repr=False)

    @classmethod
    def create(
        cls,
        g1: int,
        h1: int,
        g2: int,
        h2: int,
        q: int,
        alpha: int,
        w: Optional[int] = None,
    ) -> DLEQProof:
        """Start a proof; draws a fresh nonce in ``[0, q)`` unless *w* is given."""
        if w is None:
            w = bigint.random_below(q)
        return cls(g1=g1, h1=h1, g2=g2, h2=h2, q=q, alpha=alpha, w=w)

    @property
    def a1(self) -> int:
        return bigint.mod_exp(self.g1, self.w, self.q)

    @property
    def a2(self) -> int:
        return bigint.mod_exp(self.g2, self.w, self.q)

    def transcript(self) -> Tuple[int, int, int, int]:
        """Values fed into the Fiat-Shamir hash, in order."""
        return (self.h1, self.h2, self.a1, self.a2)

    def response(self, challenge: int) -> int:
        return (self.w - self.alpha * challenge) % (self.q - 1)


def recompute_commitments(
    g1: int, h1: int, g2: int, h2: int, q: int, challenge: int, response: int
) -> Tuple[int, int]:
    """Verifier side: ``(g1^r h1^c mod q, g2^r h2^c mod q)``."""
    a1 = (bigint.mod_exp(g1, response, q) * bigint.mod_exp(h1, challenge, q)) % q
    a2 = (bigint.mod_exp(g2, response, q) * bigint.mod_exp(h2, challenge, q)) % q
    return a1, a2


def prove(proof: DLEQProof) -> Tuple[int, int]:
    """Stand-alone non-interactive proof: returns ``(challenge, response)``."""
    challenge = ChallengeHasher().update(*proof.transcript()).challenge(proof.q - 1)
    return challenge, proof.response(challenge)


def verify(
    g1: int, h1: int, g2: int, h2: int, q: int, challenge: int, response: int
) -> bool:
    """Check a stand-alone proof produced by :func:`prove`."""
    a1, a2 = recompute_commitments(g1, h1, g2, h2, q, challenge, response)
    expected = ChallengeHasher().update(h1, h2, a1, a2).challenge(q - 1)
    return expected == challenge
