"""Hash-chained log of verifier decisions.

Every verdict the verifier hands out is appended together with the id of
the bundle it concerns.  Each entry commits to its predecessor's hash, so
rewriting history is detectable with :meth:`AuditLog.verify_chain`.
"""

from __future__ import annotations

import hashlib
import json
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

GENESIS = "0" * 64


@dataclass(frozen=True)
class AuditEntry:
    timestamp: float
    event: str  # "verify_distribution" | "verify_share" | "reconstruct"
    bundle_id: str
    accepted: bool
    prev_hash: str
    entry_hash: str


def _entry_hash(timestamp: float, event: str, bundle_id: str, accepted: bool, prev_hash: str) -> str:
    payload = json.dumps(
        {
            "accepted": accepted,
            "bundle_id": bundle_id,
            "event": event,
            "prev_hash": prev_hash,
            "timestamp": timestamp,
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode()).hexdigest()


class AuditLog:
    """Append-only, in-memory."""

    def __init__(self) -> None:
        self._entries: List[AuditEntry] = []

    @property
    def head(self) -> str:
        return self._entries[-1].entry_hash if self._entries else GENESIS

    def record(self, event: str, bundle_id: str, accepted: bool) -> AuditEntry:
        ts = time.time()
        prev = self.head
        entry = AuditEntry(
            timestamp=ts,
            event=event,
            bundle_id=bundle_id,
            accepted=accepted,
            prev_hash=prev,
            entry_hash=_entry_hash(ts, event, bundle_id, accepted, prev),
        )
        self._entries.append(entry)
        return entry

    def entries(self) -> List[Dict[str, Any]]:
        return [asdict(e) for e in self._entries]

    def verify_chain(self) -> bool:
        prev = GENESIS
        for e in self._entries:
            if e.prev_hash != prev:
                return False
            if e.entry_hash != _entry_hash(e.timestamp, e.event, e.bundle_id, e.accepted, e.prev_hash):
                return False
            prev = e.entry_hash
        return True
