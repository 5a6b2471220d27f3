"""Public verifier FastAPI application.

Anyone can submit published bundles and get a verdict; the service needs
only the group parameters, never a private key.  Every verdict is written
to a hash-chained audit log.

Endpoints:
- GET  /params               – default group parameters
- POST /verify/distribution  – check a dealer's distribution bundle
- POST /verify/share         – check a participant's decrypted share
- POST /reconstruct          – recover the secret from verified shares
- GET  /audit                – audit log + chain integrity
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from pvss.crypto.group import GroupParameters
from pvss.protocol.bundles import DistributionBundle, ShareBundle, bundle_id
from pvss.protocol.instance import PVSSInstance
from pvss.verifier.audit import AuditLog

logger = logging.getLogger(__name__)

# ------ request / response models ------


class VerifyDistributionRequest(BaseModel):
    distribution: DistributionBundle
    params: Optional[GroupParameters] = None


class VerifyShareRequest(BaseModel):
    share: ShareBundle
    distribution: DistributionBundle
    params: Optional[GroupParameters] = None


class ReconstructRequest(BaseModel):
    shares: List[ShareBundle]
    distribution: DistributionBundle
    params: Optional[GroupParameters] = None


class VerdictResponse(BaseModel):
    valid: bool
    bundle_id: str


class ReconstructResponse(BaseModel):
    secret: str  # decimal, big integers are not safe in every JSON client
    bundle_id: str
    shares_used: int


class AuditResponse(BaseModel):
    entries: List[Dict[str, Any]]
    chain_valid: bool


class VerifierState:
    """Per-service state: default parameters and the audit log."""

    def __init__(self, params: GroupParameters | None = None) -> None:
        self.params = params if params is not None else GroupParameters.rfc3526()
        self.audit = AuditLog()

    def instance(self, params: GroupParameters | None) -> PVSSInstance:
        return PVSSInstance(params if params is not None else self.params)


def create_app(state: VerifierState | None = None) -> FastAPI:
    """Factory that creates a verifier app around *state*."""
    if state is None:
        state = VerifierState()

    app = FastAPI(title="PVSS Public Verifier")

    @app.get("/params")
    def get_params() -> GroupParameters:
        return state.params

    @app.post("/verify/distribution", response_model=VerdictResponse)
    def verify_distribution(req: VerifyDistributionRequest):
        bid = bundle_id(req.distribution)
        valid = state.instance(req.params).verify_distribution(req.distribution)
        state.audit.record("verify_distribution", bid, valid)
        logger.info("distribution %s: %s", bid[:12], "valid" if valid else "INVALID")
        return VerdictResponse(valid=valid, bundle_id=bid)

    @app.post("/verify/share", response_model=VerdictResponse)
    def verify_share(req: VerifyShareRequest):
        bid = bundle_id(req.share)
        valid = state.instance(req.params).verify_share_bundle(req.share, req.distribution)
        state.audit.record("verify_share", bid, valid)
        logger.info("share %s: %s", bid[:12], "valid" if valid else "INVALID")
        return VerdictResponse(valid=valid, bundle_id=bid)

    @app.post("/reconstruct", response_model=ReconstructResponse)
    def reconstruct(req: ReconstructRequest):
        instance = state.instance(req.params)
        bid = bundle_id(req.distribution)
        verified = instance.verified_shares(req.shares, req.distribution)
        secret = instance.reconstruct(verified, req.distribution)
        state.audit.record("reconstruct", bid, secret is not None)
        if secret is None:
            raise HTTPException(
                422,
                f"Reconstruction failed with {len(verified)} verified of "
                f"{len(req.shares)} submitted shares (threshold {req.distribution.threshold})",
            )
        return ReconstructResponse(secret=str(secret), bundle_id=bid, shares_used=len(verified))

    @app.get("/audit", response_model=AuditResponse)
    def audit():
        return AuditResponse(entries=state.audit.entries(), chain_valid=state.audit.verify_chain())

    return app
