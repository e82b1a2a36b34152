from __future__ import annotations
import base64
import binascii
import hashlib

import rfc8785

DIGEST_SIZE = 32
EMPTY_DIGEST = b""  # root of a tree committed over no records


def B64(b: bytes) -> str:
    """Base64-encode bytes to ASCII string."""
    return base64.b64encode(b).decode("ascii")


def B64D(s: str) -> bytes:
    """Decode base64 ASCII string to bytes with strict validation."""
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except Exception as e:
        raise ValueError("invalid base64") from e


def parse_digest(s: str) -> bytes:
    """Parse a digest given as hex or base64; the empty string is the empty root."""
    s = s.strip()
    if not s:
        return EMPTY_DIGEST
    if len(s) == DIGEST_SIZE * 2:
        try:
            return binascii.unhexlify(s)
        except binascii.Error:
            pass
    raw = B64D(s)
    if len(raw) != DIGEST_SIZE:
        raise ValueError(f"digest must be {DIGEST_SIZE} bytes, got {len(raw)}")
    return raw


def hash_leaf(record: bytes) -> bytes:
    return hashlib.sha256(record).digest()


def hash_pair(left: bytes, right: bytes) -> bytes:
    # Plain concatenation, no leaf/node domain tag. Changing this changes every root.
    return hashlib.sha256(left + right).digest()


def jcs_dumps(obj) -> bytes:
    """Deterministic canonical JSON bytes per RFC8785."""
    return rfc8785.dumps(obj)
