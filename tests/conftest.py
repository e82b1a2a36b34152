import sys
from pathlib import Path

import pytest

# Ensure the repo root and 'src' directory are on sys.path for imports in tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for p in (ROOT, SRC):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from tests._helpers import example_records  # noqa: E402


@pytest.fixture
def records_dir(tmp_path):
    """Write records 0x00..0x04 as one file each and return the paths in order."""
    d = tmp_path / "records"
    d.mkdir()
    paths = []
    for i, rec in enumerate(example_records(5)):
        p = d / f"r{i}.bin"
        p.write_bytes(rec)
        paths.append(p)
    return paths
