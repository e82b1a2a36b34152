from __future__ import annotations
import codecs
import datetime
import json
import logging
import pathlib
from typing import List, Optional

import typer
from rich import print

from arbor_core.codec import decode_proof, encode_proof
from arbor_core.crypto import B64, B64D, jcs_dumps, parse_digest
from arbor_core.logutil import setup_logging
from arbor_core.merkle import MerkleTree, verify, verify_proof
from arbor_core.models import ProofDocument, RootDocument
from arbor_core.settings import settings

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main(
    log_level: str = typer.Option(None, help="Override ARBOR_LOG_LEVEL"),
):
    setup_logging((log_level or settings.log_level).upper())


def _show(digest: bytes) -> str:
    if not digest:
        return "<empty>"
    if settings.digest_display == "b64":
        return B64(digest)
    return digest.hex()


def _read_records(files: List[pathlib.Path]) -> List[bytes]:
    records = []
    for p in files:
        if not p.is_file():
            print(f"[red]Not a file: {p}[/red]")
            raise typer.Exit(code=2)
        records.append(p.read_bytes())
    logger.debug("read %d records", len(records))
    return records


def _digest_option(value: str) -> bytes:
    try:
        return parse_digest(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _default_out(name: str) -> pathlib.Path:
    out_dir = pathlib.Path(settings.storage_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir / name


@app.command()
def root(
    files: List[pathlib.Path] = typer.Argument(None, help="Record files, in order"),
    out: Optional[pathlib.Path] = typer.Option(
        None, help="Write a root document (JSON) here"
    ),
):
    """Compute the Merkle root over the given records."""
    records = _read_records(files or [])
    tree = MerkleTree.construct(records)
    print(f"[cyan]Root[/cyan]: {_show(tree.root)} ({tree.size} records)")
    if out is not None:
        doc = RootDocument(
            tree_size=tree.size,
            root_b64=B64(tree.root),
            ts=datetime.datetime.now(datetime.timezone.utc).isoformat(),
        )
        out.write_bytes(jcs_dumps(doc.model_dump()))
        print(f"[green]Wrote root document to {out}[/green]")


@app.command()
def prove(
    files: List[pathlib.Path] = typer.Argument(..., help="Record files, in order"),
    target: pathlib.Path = typer.Option(..., help="Record to prove membership of"),
    out: Optional[pathlib.Path] = typer.Option(None, help="Output path"),
    binary: bool = typer.Option(False, help="Write the binary wire form"),
):
    """Generate an inclusion proof for TARGET."""
    records = _read_records(files)
    record = _read_records([target])[0]
    tree = MerkleTree.construct(records)
    proof = tree.prove(record)
    if proof is None:
        print(f"[red]{target} is not a member of the tree[/red]")
        raise typer.Exit(code=1)
    if binary:
        out = out or _default_out("proof.bin")
        out.write_bytes(encode_proof(proof))
    else:
        out = out or _default_out("proof.json")
        doc = ProofDocument.from_proof(record, proof, tree.root, tree.size)
        out.write_bytes(jcs_dumps(doc.model_dump()))
    print(f"[green]Wrote {len(proof)}-step proof to {out}[/green]")


@app.command("verify")
def verify_cmd(
    files: List[pathlib.Path] = typer.Argument(None, help="Record files, in order"),
    root: str = typer.Option(..., help="Claimed root (hex or base64; '' = empty)"),
):
    """Check that the records reproduce ROOT."""
    claimed = _digest_option(root)
    ok = verify(_read_records(files or []), claimed)
    print({"root_valid": ok})
    if not ok:
        raise typer.Exit(code=1)


@app.command("verify-proof")
def verify_proof_cmd(
    record: pathlib.Path = typer.Option(..., help="Record file"),
    proof: pathlib.Path = typer.Option(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Proof (JSON document or binary)",
    ),
    root: Optional[str] = typer.Option(None, help="Claimed root (hex or base64)"),
):
    """Replay an inclusion proof for RECORD."""
    data = _read_records([record])[0]
    raw = proof.read_bytes()
    claimed = _digest_option(root) if root is not None else None
    try:
        head = raw[len(codecs.BOM_UTF8) :] if raw.startswith(codecs.BOM_UTF8) else raw
        if head.lstrip()[:1] == b"{":
            doc = ProofDocument.model_validate(json.loads(raw))
            p = doc.to_proof()
            if claimed is None:
                claimed = B64D(doc.root_b64)
        else:
            p = decode_proof(raw)
    except ValueError as e:
        print(f"[red]Invalid proof: {e}[/red]")
        raise typer.Exit(code=2)
    if claimed is None:
        raise typer.BadParameter("--root is required for binary proofs")
    ok = verify_proof(data, p, claimed)
    print({"proof_valid": ok})
    if not ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
