"""Dealer side of PVSS: distributing a secret.

API
---
distribute(params, secret, public_keys, t)           -> DistributionBundle
distribute_parallel(params, secret, public_keys, t)  -> DistributionBundle

For every recipient ``i`` (position ``1..n`` in list order) the dealer
publishes ``Y_i = pk_i^{p(i)}`` and proves, with one DLEQ per recipient,
that ``Y_i`` and ``X_i = g^{p(i)}`` use the same exponent.  ``X_i`` itself is
never sent: anyone can rebuild it from the commitments
(:func:`commitment_product`).  All proofs share a single Fiat-Shamir
challenge computed over the transcripts in public-key order.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from pvss import config
from pvss.crypto import bigint
from pvss.crypto.dleq import DLEQProof
from pvss.crypto.group import GroupParameters
from pvss.crypto.hashing import ChallengeHasher, hash_to_int
from pvss.crypto.polynomial import Polynomial
from pvss.protocol.bundles import DistributionBundle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipientProof:
    """Per-recipient intermediate values, before the challenge is known."""

    public_key: int
    position: int
    x: int
    encrypted_share: int
    proof: DLEQProof = field(repr=False)


def commitment_product(commitments: Sequence[int], position: int, q: int) -> int:
    """``X_i = prod_j C_j^{i^j} mod q``, which equals ``g^{p(i)} mod q``."""
    x = 1
    exponent = 1
    for c in commitments:
        x = (x * bigint.mod_exp(c, exponent, q)) % q
        exponent = (exponent * position) % (q - 1)
    return x


def prove_recipient(
    params: GroupParameters,
    commitments: Sequence[int],
    public_key: int,
    position: int,
    sampling_point: int,
    w: int,
) -> RecipientProof:
    """Encrypt one share and open its DLEQ proof."""
    q = params.q
    x = commitment_product(commitments, position, q)
    encrypted_share = bigint.mod_exp(public_key, sampling_point, q)
    proof = DLEQProof.create(
        g1=params.g, h1=x, g2=public_key, h2=encrypted_share, q=q, alpha=sampling_point, w=w
    )
    return RecipientProof(
        public_key=public_key,
        position=position,
        x=x,
        encrypted_share=encrypted_share,
        proof=proof,
    )


def mask_secret(params: GroupParameters, secret: int, polynomial: Polynomial) -> int:
    """``U = secret XOR (H(G^{p(0)}) mod q)``."""
    shared_value = bigint.mod_exp(params.G, polynomial.value(0, params.order), params.q)
    return bigint.xor(secret, hash_to_int(shared_value, params.q))


# ---------------------------------------------------------------------------
# Distribution
# ---------------------------------------------------------------------------


def distribute(
    params: GroupParameters,
    secret: int,
    public_keys: Sequence[int],
    threshold: int,
    polynomial: Optional[Polynomial] = None,
    w: Optional[int] = None,
) -> DistributionBundle:
    """Share *secret* among *public_keys* so that *threshold* of them recover it.

    *polynomial* must have exactly *threshold* coefficients; a random one is
    drawn if omitted.  When *w* is given it is the DLEQ nonce of every
    recipient (reproducible test vectors); otherwise each proof draws its own.
    """
    polynomial = _prepare(params, secret, public_keys, threshold, polynomial)
    commitments = polynomial.commitments(params.g, params.q)
    nonces = _nonces(params, len(public_keys), w)

    recipients = [
        prove_recipient(
            params,
            commitments,
            key,
            position,
            polynomial.value(position, params.order),
            nonces[position - 1],
        )
        for position, key in enumerate(public_keys, start=1)
    ]
    return _assemble(params, secret, polynomial, commitments, recipients)


def distribute_parallel(
    params: GroupParameters,
    secret: int,
    public_keys: Sequence[int],
    threshold: int,
    polynomial: Optional[Polynomial] = None,
    w: Optional[int] = None,
    executor: Optional[Executor] = None,
) -> DistributionBundle:
    """Same result as :func:`distribute`, with the exponentiations fanned out.

    Commitments are computed one task per coefficient, recipient proofs one
    task per recipient.  Each task returns its value; results are joined in
    list order before the order-dependent challenge hash.  A caller-supplied
    *executor* is used as-is and not shut down.

    The default thread pool does not speed anything up: big-int ``pow``
    holds the GIL.  Pass a ``ProcessPoolExecutor`` for real parallelism;
    every task argument and result pickles.
    """
    polynomial = _prepare(params, secret, public_keys, threshold, polynomial)
    nonces = _nonces(params, len(public_keys), w)
    q = params.q

    own_executor = executor is None
    if own_executor:
        executor = ThreadPoolExecutor(max_workers=config.PARALLEL_WORKERS)
    try:
        commitment_futures = [
            executor.submit(bigint.mod_exp, params.g, c, q) for c in polynomial.coefficients
        ]
        commitments = [f.result() for f in commitment_futures]

        recipient_futures = [
            executor.submit(
                prove_recipient,
                params,
                commitments,
                key,
                position,
                polynomial.value(position, params.order),
                nonces[position - 1],
            )
            for position, key in enumerate(public_keys, start=1)
        ]
        recipients = [f.result() for f in recipient_futures]
    finally:
        if own_executor:
            executor.shutdown(wait=True)

    return _assemble(params, secret, polynomial, commitments, recipients)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _prepare(
    params: GroupParameters,
    secret: int,
    public_keys: Sequence[int],
    threshold: int,
    polynomial: Optional[Polynomial],
) -> Polynomial:
    if threshold < 1 or threshold > len(public_keys):
        raise ValueError(f"Invalid threshold: t={threshold}, n={len(public_keys)}")
    if len(set(public_keys)) != len(public_keys):
        raise ValueError("Duplicate public keys")
    if secret < 0:
        raise ValueError("Secret must be a non-negative integer")
    if polynomial is None:
        return Polynomial.random(threshold - 1, params.q)
    if len(polynomial.coefficients) != threshold:
        raise ValueError(
            f"Polynomial has {len(polynomial.coefficients)} coefficients, "
            f"threshold {threshold} needs degree {threshold - 1}"
        )
    return polynomial


def _nonces(params: GroupParameters, n: int, w: Optional[int]) -> List[int]:
    if w is not None:
        return [w] * n
    return [bigint.random_below(params.q) for _ in range(n)]


def _assemble(
    params: GroupParameters,
    secret: int,
    polynomial: Polynomial,
    commitments: List[int],
    recipients: List[RecipientProof],
) -> DistributionBundle:
    """Bind all proofs with one challenge and build the bundle."""
    hasher = ChallengeHasher()
    for r in recipients:
        hasher.update(*r.proof.transcript())
    challenge = hasher.challenge(params.order)

    positions: Dict[int, int] = {}
    shares: Dict[int, int] = {}
    responses: Dict[int, int] = {}
    for r in recipients:
        positions[r.public_key] = r.position
        shares[r.public_key] = r.encrypted_share
        responses[r.public_key] = r.proof.response(challenge)

    logger.debug(
        "distributed secret to %d recipients (threshold %d)", len(recipients), len(commitments)
    )
    return DistributionBundle(
        commitments=commitments,
        positions=positions,
        shares=shares,
        public_keys=[r.public_key for r in recipients],
        challenge=challenge,
        responses=responses,
        U=mask_secret(params, secret, polynomial),
    )
