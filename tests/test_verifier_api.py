"""Tests for the public verifier service."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from pvss.verifier.app import VerifierState, create_app

SECRET = 1234567890


@pytest.fixture
def state(params) -> VerifierState:
    return VerifierState(params)


@pytest.fixture
def client(state) -> TestClient:
    return TestClient(create_app(state))


@pytest.fixture
def all_shares(instance, fixed_distribution):
    return [
        instance.extract_share(fixed_distribution, x, w=1337)
        for x in (7901, 4801, 1453)
    ]


def _dump(model):
    return model.model_dump(mode="json")


# ==================================================================
# Parameters
# ==================================================================


def test_params(client, params):
    r = client.get("/params")
    assert r.status_code == 200
    body = r.json()
    assert body["q"] == params.q
    assert body["g"] == params.g
    assert body["G"] == params.G


def test_default_state_uses_rfc3526():
    state = VerifierState()
    assert state.params.bit_length == 2048


# ==================================================================
# Distribution verification
# ==================================================================


class TestVerifyDistribution:
    def test_valid(self, client, fixed_distribution):
        r = client.post("/verify/distribution", json={"distribution": _dump(fixed_distribution)})
        assert r.status_code == 200
        assert r.json()["valid"] is True
        assert len(r.json()["bundle_id"]) == 64

    def test_tampered(self, client, fixed_distribution):
        tampered = fixed_distribution.model_copy(
            update={"challenge": fixed_distribution.challenge + 1}
        )
        r = client.post("/verify/distribution", json={"distribution": _dump(tampered)})
        assert r.status_code == 200
        assert r.json()["valid"] is False

    def test_explicit_params(self, params, fixed_distribution):
        client = TestClient(create_app(VerifierState(params)))
        r = client.post(
            "/verify/distribution",
            json={"distribution": _dump(fixed_distribution), "params": _dump(params)},
        )
        assert r.json()["valid"] is True

    def test_malformed_bundle(self, client):
        r = client.post("/verify/distribution", json={"distribution": {"commitments": [-1]}})
        assert r.status_code == 422


# ==================================================================
# Share verification
# ==================================================================


class TestVerifyShare:
    def test_valid(self, client, fixed_share, fixed_distribution):
        r = client.post(
            "/verify/share",
            json={"share": _dump(fixed_share), "distribution": _dump(fixed_distribution)},
        )
        assert r.status_code == 200
        assert r.json()["valid"] is True

    def test_forged_share(self, client, fixed_share, fixed_distribution):
        forged = fixed_share.model_copy(update={"share": fixed_share.share + 1})
        r = client.post(
            "/verify/share",
            json={"share": _dump(forged), "distribution": _dump(fixed_distribution)},
        )
        assert r.json()["valid"] is False


# ==================================================================
# Reconstruction
# ==================================================================


class TestReconstruct:
    def test_recovers_secret(self, client, all_shares, fixed_distribution):
        r = client.post(
            "/reconstruct",
            json={
                "shares": [_dump(s) for s in all_shares],
                "distribution": _dump(fixed_distribution),
            },
        )
        assert r.status_code == 200
        assert r.json()["secret"] == str(SECRET)
        assert r.json()["shares_used"] == 3

    def test_forged_share_is_not_used(self, client, all_shares, fixed_distribution):
        shares = list(all_shares)
        shares[0] = shares[0].model_copy(update={"share": shares[0].share + 1})
        r = client.post(
            "/reconstruct",
            json={"shares": [_dump(s) for s in shares], "distribution": _dump(fixed_distribution)},
        )
        assert r.status_code == 422

    def test_forged_extra_share_not_counted(self, client, all_shares, fixed_distribution):
        forged = all_shares[0].model_copy(update={"share": all_shares[0].share + 1})
        r = client.post(
            "/reconstruct",
            json={
                "shares": [_dump(s) for s in [forged, *all_shares]],
                "distribution": _dump(fixed_distribution),
            },
        )
        assert r.status_code == 200
        assert r.json()["secret"] == str(SECRET)
        assert r.json()["shares_used"] == 3

    def test_too_few_shares(self, client, all_shares, fixed_distribution):
        r = client.post(
            "/reconstruct",
            json={
                "shares": [_dump(s) for s in all_shares[:2]],
                "distribution": _dump(fixed_distribution),
            },
        )
        assert r.status_code == 422
        assert "threshold 3" in r.json()["detail"]


# ==================================================================
# Audit log
# ==================================================================


def test_audit_records_every_verdict(client, fixed_share, fixed_distribution):
    client.post("/verify/distribution", json={"distribution": _dump(fixed_distribution)})
    client.post(
        "/verify/share",
        json={"share": _dump(fixed_share), "distribution": _dump(fixed_distribution)},
    )
    r = client.get("/audit")
    body = r.json()
    assert [e["event"] for e in body["entries"]] == ["verify_distribution", "verify_share"]
    assert all(e["accepted"] for e in body["entries"])
    assert body["chain_valid"] is True


def test_audit_records_rejections(client, state, all_shares, fixed_distribution):
    client.post(
        "/reconstruct",
        json={"shares": [_dump(all_shares[0])], "distribution": _dump(fixed_distribution)},
    )
    (entry,) = state.audit.entries()
    assert entry["event"] == "reconstruct"
    assert entry["accepted"] is False


@pytest.mark.asyncio
async def test_async_client(state, fixed_distribution):
    from httpx import ASGITransport, AsyncClient

    transport = ASGITransport(app=create_app(state))
    async with AsyncClient(transport=transport, base_url="http://verifier") as ac:
        r = await ac.post(
            "/verify/distribution", json={"distribution": _dump(fixed_distribution)}
        )
    assert r.status_code == 200
    assert r.json()["valid"] is True
