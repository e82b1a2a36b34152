from __future__ import annotations
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .crypto import B64, B64D, DIGEST_SIZE
from .merkle import Proof, ProofStep, Side


class ProofStepModel(BaseModel):
    side: Literal["L", "R"]
    sibling_b64: str

    @field_validator("sibling_b64")
    @classmethod
    def _sibling_is_digest(cls, v: str) -> str:
        if len(B64D(v)) != DIGEST_SIZE:
            raise ValueError(f"sibling must decode to {DIGEST_SIZE} bytes")
        return v


class ProofDocument(BaseModel):
    """JSON transport form of an inclusion proof.

    ``record_b64`` and ``root_b64`` are carried alongside the steps so a holder
    can replay the proof without any other context. ``tree_size`` is
    informational only; it is not covered by the proof.
    """

    record_b64: str
    root_b64: str
    tree_size: int = Field(ge=1)
    steps: List[ProofStepModel] = Field(default_factory=list)

    @classmethod
    def from_proof(
        cls, record: bytes, proof: Proof, root: bytes, tree_size: int
    ) -> "ProofDocument":
        return cls(
            record_b64=B64(record),
            root_b64=B64(root),
            tree_size=tree_size,
            steps=[
                ProofStepModel(side=side.value, sibling_b64=B64(sibling))
                for side, sibling in proof
            ],
        )

    def to_proof(self) -> Proof:
        return Proof(
            tuple(ProofStep(Side(s.side), B64D(s.sibling_b64)) for s in self.steps)
        )


class RootDocument(BaseModel):
    tree_size: int = Field(ge=0)
    root_b64: str
    ts: Optional[str] = None
