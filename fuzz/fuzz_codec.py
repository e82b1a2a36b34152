"""Fuzz harness for the binary proof decoder.

Arbitrary bytes must either decode to a proof that re-encodes identically or
raise ValueError; anything else is a crash.
"""
from __future__ import annotations
import atheris
import sys

with atheris.instrument_imports():
    from arbor_core.codec import decode_proof, encode_proof


def TestOneInput(data: bytes):  # noqa: N802
    try:
        proof = decode_proof(data)
    except ValueError:
        return
    if encode_proof(proof) != data:
        raise RuntimeError("decoded proof did not re-encode to the same bytes")


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
