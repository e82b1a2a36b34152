"""Inclusion proof fuzzing with mutated proofs."""
from __future__ import annotations
import atheris
import sys
import random

with atheris.instrument_imports():
    from arbor_core.merkle import Proof, ProofStep, construct, verify_proof


def TestOneInput(data: bytes):  # noqa: N802
    if len(data) < 8:
        return
    # Derive variable chunk size & mutation seed
    seed = int.from_bytes(data[:4], 'little')
    random.seed(seed)
    chunk_len = 1 + (data[4] % 32)
    body = data[5:]
    records = [body[i:i+chunk_len] for i in range(0, min(len(body), chunk_len * 16), chunk_len)]
    if len(set(records)) < 3:
        return
    tree = construct(records)
    rec = records[seed % len(records)]
    proof = tree.prove(rec)
    steps = list(proof)
    # With some probability, mutate one step to exercise negative path
    if random.random() < 0.2 and steps:
        i = random.randrange(len(steps))
        side, sib = steps[i]
        steps[i] = ProofStep(side, bytes([sib[0] ^ 0x01]) + sib[1:])
        if verify_proof(rec, Proof(tuple(steps)), tree.root):
            raise RuntimeError("tampered proof unexpectedly verified")
    else:
        if not verify_proof(rec, proof, tree.root):
            raise RuntimeError("valid proof failed")


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
