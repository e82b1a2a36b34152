from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError

from arbor_core.crypto import B64D
from arbor_core.merkle import compute_root, verify_proof
from arbor_core.models import ProofDocument, RootDocument


def verify_proof_document(
    doc_json: Dict[str, Any],
    record: Optional[bytes] = None,
    root: Optional[bytes] = None,
) -> bool:
    """Return True if the proof document reproduces its root.

    When ``record`` or ``root`` are supplied they must match the values embedded
    in the document; a document is never trusted to name its own root when the
    caller already holds one.
    """
    try:
        doc = ProofDocument.model_validate(doc_json)
        doc_record = B64D(doc.record_b64)
        doc_root = B64D(doc.root_b64)
        proof = doc.to_proof()
    except (ValidationError, ValueError):
        return False
    if record is not None and bytes(record) != doc_record:
        return False
    if root is not None and bytes(root) != doc_root:
        return False
    return verify_proof(doc_record, proof, doc_root)


def verify_root_document(doc_json: Dict[str, Any], records: Sequence[bytes]) -> bool:
    """Verify a tree head against the full record set it claims to commit."""
    try:
        doc = RootDocument.model_validate(doc_json)
        claimed = B64D(doc.root_b64)
    except (ValidationError, ValueError):
        return False
    if doc.tree_size != len(records):
        return False
    return compute_root(records) == claimed
