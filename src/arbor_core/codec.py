"""Binary wire form for inclusion proofs.

Layout: 4-byte big-endian step count, then per step a 1-byte side tag
(0x00 = left, 0x01 = right) followed by the 32-byte sibling digest.
"""
from __future__ import annotations
import struct

from .crypto import DIGEST_SIZE
from .merkle import Proof, ProofStep, Side

_COUNT = struct.Struct(">I")
_STEP_SIZE = 1 + DIGEST_SIZE

_TAGS = {Side.LEFT: 0x00, Side.RIGHT: 0x01}
_SIDES = {v: k for k, v in _TAGS.items()}


def encode_proof(proof: Proof) -> bytes:
    out = bytearray(_COUNT.pack(len(proof)))
    for side, sibling in proof:
        if len(sibling) != DIGEST_SIZE:
            raise ValueError(f"sibling digest must be {DIGEST_SIZE} bytes")
        out.append(_TAGS[side])
        out += sibling
    return bytes(out)


def decode_proof(data: bytes) -> Proof:
    if len(data) < _COUNT.size:
        raise ValueError("truncated proof header")
    (count,) = _COUNT.unpack_from(data, 0)
    expected = _COUNT.size + count * _STEP_SIZE
    if len(data) != expected:
        raise ValueError(
            f"proof length mismatch: header says {count} steps, got {len(data)} bytes"
        )
    steps = []
    for off in range(_COUNT.size, expected, _STEP_SIZE):
        tag = data[off]
        if tag not in _SIDES:
            raise ValueError(f"unknown side tag 0x{tag:02x}")
        steps.append(ProofStep(_SIDES[tag], bytes(data[off + 1 : off + _STEP_SIZE])))
    return Proof(tuple(steps))
