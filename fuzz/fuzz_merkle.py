"""Fuzz harness for Merkle tree construction & inclusion proof round trip."""
from __future__ import annotations
import atheris
import sys

with atheris.instrument_imports():
    from arbor_core.merkle import construct, verify, verify_proof


def TestOneInput(data: bytes):  # noqa: N802
    if not data:
        return
    # Split data deterministically into records (bounded count); records may
    # be empty or repeat, both of which construction must accept.
    size = data[0] % 33
    body = data[1:]
    if size == 0:
        records = [b""] * min(len(body), 16)
    else:
        records = [body[i : i + size] for i in range(0, min(len(body), size * 32), size)]
    tree = construct(records)
    if not verify(records, tree.root):
        raise RuntimeError("records did not reproduce their own root")
    if not records:
        return
    rec = records[data[-1] % len(records)]
    proof = tree.prove(rec)
    if proof is None:
        raise RuntimeError("member record has no proof")
    if not verify_proof(rec, proof, tree.root):
        raise RuntimeError("valid inclusion proof failed")


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
