"""Global configuration for PVSS."""

import os

# ---------- Group parameters ----------
# RFC 3526 group 14: 2048-bit MODP safe prime.  (q-1)/2 is prime as well.
RFC3526_PRIME = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3D"
    "C2007CB8A163BF0598DA48361C55D39A69163FA8FD24CF5F"
    "83655D23DCA3AD961C62F356208552BB9ED529077096966D"
    "670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9"
    "DE2BCBF6955817183995497CEA956AE515D2261898FA0510"
    "15728E5A8AACAA68FFFFFFFFFFFFFFFF",
    16,
)
RFC3526_BIT_LENGTH = 2048

DEFAULT_GENERATOR = 2  # G, the masking / key generator
DEFAULT_BIT_LENGTH = int(os.environ.get("PVSS_BIT_LENGTH", str(RFC3526_BIT_LENGTH)))

# Upper bound on the number of candidates tested during safe-prime search.
SAFE_PRIME_MAX_CANDIDATES = int(os.environ.get("PVSS_SAFE_PRIME_MAX_CANDIDATES", "10000000"))

# ---------- Parallel distribution ----------
PARALLEL_WORKERS = int(os.environ.get("PVSS_PARALLEL_WORKERS", str(os.cpu_count() or 4)))

# ---------- Logging ----------
LOG_LEVEL = os.environ.get("PVSS_LOG_LEVEL", "INFO").upper()

# ---------- Verifier service (used by the demo) ----------
# Empty string disables posting bundles to a running verifier.
VERIFIER_URL = os.environ.get("PVSS_VERIFIER_URL", "")
