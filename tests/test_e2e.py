"""End-to-end PVSS runs on freshly generated groups."""

from __future__ import annotations

import itertools

import pytest

from pvss.crypto.bigint import int_to_text, text_to_int
from pvss.crypto.group import GroupParameters
from pvss.protocol.instance import PVSSInstance
from pvss.protocol.participant import Participant

MESSAGE = "Correct horse battery staple."


@pytest.fixture(scope="module")
def instance_128() -> PVSSInstance:
    return PVSSInstance(GroupParameters.generate(128))


def _run(instance: PVSSInstance, secret: int, n: int, t: int, parallel: bool = False):
    dealer = Participant(instance)
    participants = [Participant(instance) for _ in range(n)]
    bundle = dealer.distribute(secret, [p.public_key for p in participants], t, parallel=parallel)
    return participants, bundle


def test_text_message(instance_128):
    participants, bundle = _run(instance_128, text_to_int(MESSAGE), n=3, t=3)

    for p in participants:
        assert p.verify(bundle)

    share_bundles = [p.extract_share(bundle) for p in participants]
    assert all(sb is not None for sb in share_bundles)

    for p in participants:
        for sb in share_bundles:
            assert p.verify_peer(sb, bundle)

    for p in participants:
        recovered = p.reconstruct(share_bundles, bundle)
        assert int_to_text(recovered) == MESSAGE


def test_every_subset_of_three_out_of_four(instance_128):
    """With positions 1..4 every 3-subset has coefficients with odd denominators."""
    secret = 987654321
    participants, bundle = _run(instance_128, secret, n=4, t=3)
    share_bundles = [p.extract_share(bundle) for p in participants]

    for subset in itertools.combinations(share_bundles, 3):
        assert instance_128.reconstruct(list(subset), bundle) == secret


def test_any_subset_is_secret_or_failure(instance_128):
    """Interpolation never yields a wrong value; it may fail on non-invertible subsets."""
    secret = 424242
    participants, bundle = _run(instance_128, secret, n=5, t=2)
    share_bundles = [p.extract_share(bundle) for p in participants]

    results = [
        instance_128.reconstruct(list(subset), bundle)
        for subset in itertools.combinations(share_bundles, 2)
    ]
    assert all(r in (None, secret) for r in results)
    assert secret in results


def test_below_threshold(instance_128):
    participants, bundle = _run(instance_128, 5, n=4, t=3)
    share_bundles = [p.extract_share(bundle) for p in participants]
    assert instance_128.reconstruct(share_bundles[:2], bundle) is None


def test_parallel_distribution(instance_128):
    secret = text_to_int("parallel")
    participants, bundle = _run(instance_128, secret, n=5, t=3, parallel=True)
    assert instance_128.verify_distribution(bundle)
    share_bundles = [p.extract_share(bundle) for p in participants]
    assert instance_128.reconstruct_verified(share_bundles[:3], bundle) == secret


def test_threshold_one(instance_128):
    participants, bundle = _run(instance_128, 31337, n=3, t=1)
    for p in participants:
        sb = p.extract_share(bundle)
        assert instance_128.reconstruct([sb], bundle) == 31337


def test_secret_larger_than_modulus(instance_128):
    secret = instance_128.params.q * 1000 + 17
    participants, bundle = _run(instance_128, secret, n=3, t=2)
    share_bundles = [p.extract_share(bundle) for p in participants]
    assert instance_128.reconstruct(share_bundles[:2], bundle) == secret


def test_outsider_cannot_extract(instance_128):
    participants, bundle = _run(instance_128, 1, n=2, t=2)
    outsider = Participant(instance_128)
    assert outsider.extract_share(bundle) is None


def test_threshold_above_participants(instance_128):
    with pytest.raises(ValueError):
        _run(instance_128, 1, n=2, t=3)
