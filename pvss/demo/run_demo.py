#!/usr/bin/env python3
"""PVSS end-to-end demo.

Usage:
    python -m pvss.demo.run_demo [bit_length]

The script:
1. Generates group parameters (safe prime of ``bit_length`` bits, default ``PVSS_BIT_LENGTH``).
2. Creates a dealer and four participants.
3. Shares a text message with threshold 3.
4. Every participant verifies the distribution bundle.
5. Participants extract their shares and cross-verify each other's proofs.
6. Reconstructs the message from every 3-of-4 subset.
7. Shows that a tampered share is rejected.
8. If ``PVSS_VERIFIER_URL`` is set, submits the bundles to a running
   verifier service and prints its verdicts.
"""

from __future__ import annotations

import itertools
import logging
import sys

import httpx

from pvss import config
from pvss.crypto.bigint import int_to_text, text_to_int
from pvss.protocol.bundles import ShareBundle, bundle_id
from pvss.protocol.instance import PVSSInstance
from pvss.protocol.participant import Participant

MESSAGE = "Correct horse battery staple."
NUM_PARTICIPANTS = 4
THRESHOLD = 3


def banner(msg: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {msg}")
    print(f"{'='*60}")


def main(bit_length: int = config.DEFAULT_BIT_LENGTH) -> None:
    logging.basicConfig(level=config.LOG_LEVEL)

    # 1. Parameters
    banner(f"1. {bit_length}-bit group parameters")
    if bit_length == config.RFC3526_BIT_LENGTH:
        instance = PVSSInstance.default()
    else:
        instance = PVSSInstance.generate(bit_length)
    print(f"   q = {instance.params.q}")
    print(f"   g = {instance.params.g}, G = {instance.params.G}")

    # 2. Parties
    banner("2. Creating dealer and participants")
    dealer = Participant(instance)
    participants = [Participant(instance) for _ in range(NUM_PARTICIPANTS)]
    for i, p in enumerate(participants, start=1):
        print(f"   P{i}: public key {p.public_key % 10**8}…")

    # 3. Distribution
    banner(f"3. Dealer shares {MESSAGE!r} ({THRESHOLD}-of-{NUM_PARTICIPANTS})")
    secret = text_to_int(MESSAGE)
    distribution = dealer.distribute(secret, [p.public_key for p in participants], THRESHOLD)
    print(f"   bundle_id = {bundle_id(distribution)[:16]}…")
    print(f"   challenge = {distribution.challenge % 10**8}…")

    # 4. Verification
    banner("4. Participants verify the distribution bundle")
    for i, p in enumerate(participants, start=1):
        print(f"   P{i}: {'valid' if p.verify(distribution) else 'INVALID'}")

    # 5. Extraction + cross-verification
    banner("5. Share extraction and cross-verification")
    share_bundles = []
    for i, p in enumerate(participants, start=1):
        sb = p.extract_share(distribution)
        if sb is None:
            print(f"   P{i}: no share in bundle")
            sys.exit(1)
        share_bundles.append(sb)
    for i, p in enumerate(participants, start=1):
        peers_ok = all(
            p.verify_peer(sb, distribution) for sb in share_bundles if sb.public_key != p.public_key
        )
        print(f"   P{i} accepts peer shares: {peers_ok}")

    # 6. Reconstruction
    banner("6. Reconstruction from each threshold subset")
    for subset in itertools.combinations(range(NUM_PARTICIPANTS), THRESHOLD):
        chosen = [share_bundles[i] for i in subset]
        label = ",".join(f"P{i + 1}" for i in subset)
        recovered = instance.reconstruct(chosen, distribution)
        if recovered is None:
            print(f"   {{{label}}}: not invertible mod q-1, try another subset")
        else:
            print(f"   {{{label}}}: {int_to_text(recovered)!r}")

    # 7. Tampering
    banner("7. Tampered share")
    honest = share_bundles[0]
    forged = ShareBundle(
        public_key=honest.public_key,
        share=(honest.share * 2) % instance.params.q,
        challenge=honest.challenge,
        response=honest.response,
    )
    print(f"   forged share verifies: {instance.verify_share_bundle(forged, distribution)}")
    recovered = instance.reconstruct_verified([forged] + share_bundles[1:], distribution)
    print(f"   reconstruction without it: {int_to_text(recovered)!r}" if recovered is not None
          else "   reconstruction without it: failed")

    # 8. Remote verifier
    if config.VERIFIER_URL:
        banner(f"8. Submitting to verifier at {config.VERIFIER_URL}")
        params = instance.params.model_dump(mode="json")
        with httpx.Client(base_url=config.VERIFIER_URL, timeout=30.0) as client:
            resp = client.post(
                "/verify/distribution",
                json={"distribution": distribution.model_dump(mode="json"), "params": params},
            )
            print(f"   distribution: {resp.json()}")
            resp = client.post(
                "/reconstruct",
                json={
                    "shares": [sb.model_dump(mode="json") for sb in share_bundles],
                    "distribution": distribution.model_dump(mode="json"),
                    "params": params,
                },
            )
            if resp.status_code == 200:
                print(f"   reconstructed: {int_to_text(int(resp.json()['secret']))!r}")
            else:
                print(f"   reconstruct → HTTP {resp.status_code}: {resp.text}")

    banner("Done")


if __name__ == "__main__":
    main(int(sys.argv[1]) if len(sys.argv) > 1 else config.DEFAULT_BIT_LENGTH)
