"""Published PVSS messages.

A ``DistributionBundle`` is produced once per shared secret by the dealer;
a ``ShareBundle`` once per participant after extraction.  Both are plain
records that round-trip through JSON; all mappings are keyed by the
recipient's public key.
"""

from __future__ import annotations

import hashlib
import json
from typing import Dict, List, Union

from pydantic import BaseModel, ConfigDict, NonNegativeInt, PositiveInt


class DistributionBundle(BaseModel):
    """Dealer output: commitments, encrypted shares and the batched proof."""

    model_config = ConfigDict(frozen=True)

    commitments: List[NonNegativeInt]
    # public key -> evaluation point (1..n, list order)
    positions: Dict[NonNegativeInt, PositiveInt]
    # public key -> Y_i = pk_i^{p(i)} mod q
    shares: Dict[NonNegativeInt, NonNegativeInt]
    public_keys: List[NonNegativeInt]
    challenge: NonNegativeInt
    # public key -> DLEQ response r_i
    responses: Dict[NonNegativeInt, NonNegativeInt]
    # secret XOR H(G^{p(0)})
    U: NonNegativeInt

    @property
    def threshold(self) -> int:
        return len(self.commitments)

    def is_complete(self) -> bool:
        """Every listed key has a position, a share and a response."""
        keys = set(self.public_keys)
        return keys == set(self.positions) == set(self.shares) == set(self.responses)


class ShareBundle(BaseModel):
    """Decrypted share plus the proof that it was decrypted correctly."""

    model_config = ConfigDict(frozen=True)

    public_key: NonNegativeInt
    share: NonNegativeInt
    challenge: NonNegativeInt
    response: NonNegativeInt


Bundle = Union[DistributionBundle, ShareBundle]


def bundle_id(bundle: Bundle) -> str:
    """SHA-256 of the canonical JSON form (sorted keys, no whitespace)."""
    canonical = json.dumps(
        bundle.model_dump(mode="json"),
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode()).hexdigest()
