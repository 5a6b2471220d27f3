"""A party in the PVSS scheme.

The same participant can act as dealer (``distribute``) for a secret of
its own and as recipient (``extract_share``) for bundles addressed to its
public key.
"""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Optional, Sequence

from pvss.crypto.keys import KeyPair
from pvss.crypto.polynomial import Polynomial
from pvss.protocol import dealer
from pvss.protocol.bundles import DistributionBundle, ShareBundle
from pvss.protocol.instance import PVSSInstance


class Participant:
    def __init__(self, instance: PVSSInstance, key_pair: Optional[KeyPair] = None) -> None:
        self.instance = instance
        self.key_pair = key_pair if key_pair is not None else KeyPair.generate(instance.params)

    @classmethod
    def from_private_key(cls, instance: PVSSInstance, private_key: int) -> Participant:
        return cls(instance, KeyPair.from_private_key(instance.params, private_key))

    @property
    def public_key(self) -> int:
        return self.key_pair.public_key

    def distribute(
        self,
        secret: int,
        public_keys: Sequence[int],
        threshold: int,
        polynomial: Optional[Polynomial] = None,
        w: Optional[int] = None,
        parallel: bool = False,
        executor: Optional[Executor] = None,
    ) -> DistributionBundle:
        """Act as dealer: share *secret* among *public_keys* with *threshold*.

        Raises ``ValueError`` if ``threshold > len(public_keys)``.
        """
        params = self.instance.params
        if parallel:
            return dealer.distribute_parallel(
                params, secret, public_keys, threshold, polynomial, w, executor
            )
        return dealer.distribute(params, secret, public_keys, threshold, polynomial, w)

    def extract_share(
        self, distribution_bundle: DistributionBundle, w: Optional[int] = None
    ) -> Optional[ShareBundle]:
        """Decrypt our share; ``None`` if the bundle has nothing for our key."""
        return self.instance.extract_share(distribution_bundle, self.key_pair.private_key, w)

    def verify(self, distribution_bundle: DistributionBundle) -> bool:
        return self.instance.verify_distribution(distribution_bundle)

    def verify_peer(
        self,
        share_bundle: ShareBundle,
        distribution_bundle: DistributionBundle,
        public_key: Optional[int] = None,
    ) -> bool:
        return self.instance.verify_share_bundle(share_bundle, distribution_bundle, public_key)

    def reconstruct(
        self, share_bundles: Sequence[ShareBundle], distribution_bundle: DistributionBundle
    ) -> Optional[int]:
        return self.instance.reconstruct(list(share_bundles), distribution_bundle)
