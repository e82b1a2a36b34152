import logging
import math

import pytest

from arbor_core.crypto import EMPTY_DIGEST, hash_leaf, hash_pair
from arbor_core.merkle import (
    MerkleTree,
    Proof,
    ProofStep,
    Side,
    construct,
    prove,
    root,
    verify,
    verify_proof,
)
from tests._helpers import example_records


def test_known_roots():
    assert root(construct(example_records(4))).hex() == (
        "9675e04b4ba9dc81b06e81731e2d21caa2c95557a85dcfa3fff70c9ff0f30b2e"
    )
    assert root(construct(example_records(3))).hex() == (
        "773a93ac37ea78b3f14ac31872c83886b0a0f1fec562c4e848e023c889c2ce9f"
    )
    assert root(construct(example_records(8))).hex() == (
        "0727b310f87099c1ba2ec0ba408def82c308237c8577f0bdfd2643e9cc6b7578"
    )


def test_odd_node_promoted_unchanged():
    l0, l1, l2 = (hash_leaf(r) for r in example_records(3))
    tree = construct(example_records(3))
    assert tree.levels[1] == (hash_pair(l0, l1), l2)
    assert tree.root == hash_pair(hash_pair(l0, l1), l2)
    # not the duplicate-last-node convention
    assert tree.root != hash_pair(hash_pair(l0, l1), hash_pair(l2, l2))


def test_level_shape():
    for n in range(1, 20):
        tree = construct(example_records(n))
        assert len(tree.levels[0]) == n
        for below, above in zip(tree.levels, tree.levels[1:]):
            assert len(above) == math.ceil(len(below) / 2)
        assert len(tree.levels[-1]) == 1
        assert tree.size == n


def test_single_record():
    tree = construct([b"only"])
    assert tree.root == hash_leaf(b"only")
    proof = tree.prove(b"only")
    assert proof is not None
    assert len(proof) == 0
    assert verify_proof(b"only", proof, tree.root)


def test_empty_tree():
    tree = construct([])
    assert tree.root == EMPTY_DIGEST
    assert tree.size == 0
    assert prove(tree, b"") is None


def test_empty_sentinel_verification():
    assert verify([], EMPTY_DIGEST)
    assert not verify([b"\x00"], EMPTY_DIGEST)
    assert not verify([], hash_leaf(b"\x00"))


def test_verify_agrees_with_construct():
    for n in range(1, 11):
        data = example_records(n)
        assert verify(data, construct(data).root)


def test_verify_detects_tampering():
    data = [b"alpha", b"beta", b"gamma", b"delta", b"epsilon"]
    r = construct(data).root
    for i, rec in enumerate(data):
        for j in range(len(rec)):
            tampered = list(data)
            b = bytearray(rec)
            b[j] ^= 0x01
            tampered[i] = bytes(b)
            assert not verify(tampered, r)


def test_verify_is_order_sensitive():
    data = example_records(4)
    assert not verify(list(reversed(data)), construct(data).root)


def test_prove_and_verify_every_member():
    for n in range(1, 11):
        data = example_records(n)
        tree = construct(data)
        bound = math.ceil(math.log2(n)) if n > 1 else 0
        for rec in data:
            proof = tree.prove(rec)
            assert proof is not None
            assert len(proof) <= bound
            assert verify_proof(rec, proof, tree.root)
        assert tree.prove(bytes([n + 1])) is None


def test_proof_orientation():
    data = example_records(3)
    tree = construct(data)
    l0, l1, l2 = tree.levels[0]
    assert tree.prove(data[0]).steps == (
        ProofStep(Side.RIGHT, l1),
        ProofStep(Side.RIGHT, l2),
    )
    assert tree.prove(data[1]).steps == (
        ProofStep(Side.LEFT, l0),
        ProofStep(Side.RIGHT, l2),
    )
    # promoted leaf has no sibling at level 0
    assert tree.prove(data[2]).steps == (ProofStep(Side.LEFT, hash_pair(l0, l1)),)


def test_proof_fails_against_other_root_or_record():
    tree = construct(example_records(6))
    proof = tree.prove(b"\x02")
    assert not verify_proof(b"\x03", proof, tree.root)
    assert not verify_proof(b"\x02", proof, construct(example_records(7)).root)
    assert not verify_proof(b"\x02", proof, EMPTY_DIGEST)


def test_tampered_proof_rejected():
    tree = construct(example_records(5))
    proof = tree.prove(b"\x01")
    side, sib = proof.steps[0]
    bad = Proof((ProofStep(side, bytes([sib[0] ^ 1]) + sib[1:]),) + proof.steps[1:])
    assert not verify_proof(b"\x01", bad, tree.root)
    flipped_side = Side.RIGHT if side == Side.LEFT else Side.LEFT
    flipped = Proof((ProofStep(flipped_side, sib),) + proof.steps[1:])
    assert not verify_proof(b"\x01", flipped, tree.root)


def test_deterministic():
    data = [b"a", b"b", b"c", b"d", b"e"]
    t1, t2 = construct(data), MerkleTree.construct(list(data))
    assert t1.root == t2.root
    for rec in data:
        assert t1.prove(rec) == t2.prove(rec)


def test_duplicate_records_keep_last_index():
    data = [b"x", b"y", b"x"]
    tree = construct(data)
    assert tree.leaf_index[hash_leaf(b"x")] == 2
    proof = tree.prove(b"x")
    assert verify_proof(b"x", proof, tree.root)


@pytest.mark.parametrize("record", [b"", b"\x00" * 1000])
def test_edge_records(record):
    tree = construct([record, b"other"])
    assert verify_proof(record, tree.prove(record), tree.root)


def test_proof_outlives_tree():
    tree = construct(example_records(4))
    r = tree.root
    proof = tree.prove(b"\x03")
    del tree
    assert verify_proof(b"\x03", proof, r)


def test_verify_accepts_one_shot_iterables():
    data = example_records(5)
    good = construct(data).root
    assert verify(iter(data), good) is True
    assert verify((r for r in data), b"\x00" * 32) is False
    assert verify(iter([]), good) is False


def test_mismatch_logs_both_digests(caplog):
    data = example_records(4)
    tree = construct(data)
    wrong = hash_leaf(b"nope")
    with caplog.at_level(logging.DEBUG, logger="arbor_core.merkle"):
        assert not verify(data, wrong)
        assert not verify_proof(b"\x01", tree.prove(b"\x01"), wrong)
    assert tree.root.hex() in caplog.text
    assert wrong.hex() in caplog.text


def test_tree_is_read_only():
    tree = construct(example_records(3))
    with pytest.raises(AttributeError):
        tree.levels[0].append(b"x")
    with pytest.raises(TypeError):
        tree.levels[0][0] = b"x"
    with pytest.raises(TypeError):
        tree.leaf_index[b"x"] = 0
    with pytest.raises(AttributeError):
        tree.levels = ()
