from __future__ import annotations
import enum
import logging
import types
from dataclasses import dataclass, field
from typing import (
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
)

from .crypto import EMPTY_DIGEST, hash_leaf, hash_pair

logger = logging.getLogger(__name__)


class Side(str, enum.Enum):
    """Which side of the running digest a sibling is concatenated on."""

    LEFT = "L"
    RIGHT = "R"


class ProofStep(NamedTuple):
    side: Side
    sibling: bytes


@dataclass(frozen=True)
class Proof:
    """Inclusion proof: sibling digests ordered leaf to root."""

    steps: Tuple[ProofStep, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)


def _reduce(lvl: List[bytes]) -> List[bytes]:
    nxt = []
    for i in range(0, len(lvl), 2):
        if i + 1 < len(lvl):
            nxt.append(hash_pair(lvl[i], lvl[i + 1]))
        else:
            nxt.append(lvl[i])  # promote unpaired node unchanged
    return nxt


@dataclass(frozen=True)
class MerkleTree:
    levels: Tuple[Tuple[bytes, ...], ...]  # level 0 = leaf digests, last = (root,)
    leaf_index: Mapping[bytes, int] = field(repr=False)

    @classmethod
    def construct(cls, records: Sequence[bytes]) -> "MerkleTree":
        leaf_index: Dict[bytes, int] = {}
        lvl = []
        for i, record in enumerate(records):
            h = hash_leaf(bytes(record))
            # duplicate leaves keep the last position
            leaf_index[h] = i
            lvl.append(h)
        levels = []
        while len(lvl) > 1:
            levels.append(lvl)
            lvl = _reduce(lvl)
        levels.append(lvl)
        logger.debug(
            "built merkle tree: %d leaves, %d levels", len(levels[0]), len(levels)
        )
        return cls(
            tuple(tuple(lvl) for lvl in levels), types.MappingProxyType(leaf_index)
        )

    @property
    def root(self) -> bytes:
        top = self.levels[-1]
        return top[0] if top else EMPTY_DIGEST

    @property
    def size(self) -> int:
        return len(self.levels[0])

    def prove(self, record: bytes) -> Optional[Proof]:
        """Return the inclusion proof for ``record``, or None if it is not a leaf."""
        idx = self.leaf_index.get(hash_leaf(bytes(record)))
        if idx is None:
            return None
        steps = []
        for level in self.levels[:-1]:
            if idx % 2 == 1:
                steps.append(ProofStep(Side.LEFT, level[idx - 1]))
            elif idx + 1 < len(level):
                steps.append(ProofStep(Side.RIGHT, level[idx + 1]))
            idx //= 2
        logger.debug("proof generated with %d steps", len(steps))
        return Proof(tuple(steps))


def construct(records: Sequence[bytes]) -> MerkleTree:
    return MerkleTree.construct(records)


def root(tree: MerkleTree) -> bytes:
    return tree.root


def prove(tree: MerkleTree, record: bytes) -> Optional[Proof]:
    return tree.prove(record)


def compute_root(records: Iterable[bytes]) -> bytes:
    """Root over ``records`` without keeping intermediate levels."""
    lvl = [hash_leaf(bytes(r)) for r in records]
    if not lvl:
        return EMPTY_DIGEST
    while len(lvl) > 1:
        lvl = _reduce(lvl)
    return lvl[0]


def verify(records: Iterable[bytes], claimed_root: bytes) -> bool:
    """True iff ``records`` (in order) reproduce ``claimed_root`` exactly."""
    records = list(records)
    computed = compute_root(records)
    ok = computed == bytes(claimed_root)
    if not ok:
        logger.debug(
            "root mismatch over %d records: computed %s, claimed %s",
            len(records),
            computed.hex(),
            bytes(claimed_root).hex(),
        )
    return ok


def verify_proof(record: bytes, proof: Proof, claimed_root: bytes) -> bool:
    h = hash_leaf(bytes(record))
    for side, sibling in proof:
        if side == Side.LEFT:
            h = hash_pair(sibling, h)
        else:
            h = hash_pair(h, sibling)
    ok = h == bytes(claimed_root)
    if not ok:
        logger.debug(
            "inclusion proof reproduced %s, claimed %s", h.hex(), bytes(claimed_root).hex()
        )
    return ok
