"""Shared fixtures: a fixed small group with known test vectors."""

from __future__ import annotations

import pytest

from pvss.crypto.group import GroupParameters
from pvss.crypto.polynomial import Polynomial
from pvss.protocol import dealer
from pvss.protocol.instance import PVSSInstance

# Small (non-safe) prime group used by the regression vectors.
SMALL_Q = 179426549
SMALL_g = 1301081
SMALL_G = 15486487

RECIPIENT_PRIVATE_KEYS = [7901, 4801, 1453]
COEFFICIENTS = [164102006, 43489589, 98100795]
DEALER_NONCE = 6345
SECRET = 1234567890


@pytest.fixture
def params() -> GroupParameters:
    return GroupParameters(q=SMALL_Q, g=SMALL_g, G=SMALL_G, bit_length=64)


@pytest.fixture
def instance(params) -> PVSSInstance:
    return PVSSInstance(params)


@pytest.fixture
def recipient_keys(params):
    """(private_key, public_key) for the three fixed recipients."""
    return [(x, params.generate_public_key(x)) for x in RECIPIENT_PRIVATE_KEYS]


@pytest.fixture
def fixed_distribution(params, recipient_keys):
    """Deterministic distribution bundle (threshold 3, nonce 6345)."""
    return dealer.distribute(
        params,
        SECRET,
        [pk for _, pk in recipient_keys],
        threshold=3,
        polynomial=Polynomial(COEFFICIENTS),
        w=DEALER_NONCE,
    )


@pytest.fixture
def fixed_share(instance, fixed_distribution):
    """Share bundle of the first recipient (private key 7901, nonce 1337)."""
    return instance.extract_share(fixed_distribution, 7901, w=1337)


@pytest.fixture(scope="session")
def generated_params() -> GroupParameters:
    """A freshly generated 64-bit safe-prime group (shared across tests)."""
    return GroupParameters.generate(64)
