"""Global pytest environment isolation for RefScan.

Ensures tests never write logs into a developer's real app data directory.
"""

from __future__ import annotations

import atexit
import os
import shutil
import tempfile
from pathlib import Path

import pytest

TEST_ROOT = Path(tempfile.mkdtemp(prefix="refscan-tests-")).resolve()
TEST_HOME = TEST_ROOT / "home"
TEST_CORPUS = TEST_ROOT / "corpus"

os.environ["REFSCAN_HOME"] = str(TEST_HOME)
os.environ["REFSCAN_LOGS_DIR"] = str(TEST_HOME / "logs")
os.environ["REFSCAN_ROOT"] = str(TEST_CORPUS)
for name in (
    "REFSCAN_MAX_FILES",
    "REFSCAN_MAX_LINES_PER_FILE",
    "REFSCAN_MAX_SEARCH_MS",
    "REFSCAN_PROGRESS_EVERY",
    "REFSCAN_MATCH_MODE",
    "REFSCAN_VERBOSE",
    "REFSCAN_INCLUDE_GLOB",
    "REFSCAN_EXCLUDE_GLOB",
):
    os.environ.pop(name, None)

TEST_HOME.mkdir(parents=True, exist_ok=True)
TEST_CORPUS.mkdir(parents=True, exist_ok=True)

PRICING_SOURCE = """export function calculateDiscount(price: number): number {
  if (price > 100) {
    return price * 0.9;
  }
  return price * 0.95;
}

export function main() {
  const totalPrice = 150;
  const discountedPrice = calculateDiscount(totalPrice);
  console.log('Discounted:', discountedPrice);
}
"""


def write_pricing_corpus(root: Path) -> Path:
    """One file declaring and calling `calculateDiscount`, plus noise files."""
    src = root / "src"
    src.mkdir(parents=True, exist_ok=True)
    target = src / "a.ts"
    target.write_text(PRICING_SOURCE, encoding="utf-8")
    (src / "notes.md").write_text("Nothing to see here.\n", encoding="utf-8")
    vendored = root / "node_modules" / "pkg"
    vendored.mkdir(parents=True, exist_ok=True)
    (vendored / "index.js").write_text("calculateDiscount();\n", encoding="utf-8")
    return target


@pytest.fixture
def pricing_corpus(tmp_path):
    write_pricing_corpus(tmp_path)
    return tmp_path


def _cleanup_test_dirs():
    shutil.rmtree(TEST_ROOT, ignore_errors=True)


atexit.register(_cleanup_test_dirs)
