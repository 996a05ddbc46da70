import json
from pathlib import Path

import pytest

SAMPLES_DIR = Path(__file__).resolve().parent.parent / "sample_receipts"


@pytest.fixture
def target_receipt():
    return json.loads((SAMPLES_DIR / "target.json").read_text(encoding="utf-8"))


@pytest.fixture
def mm_receipt():
    return json.loads((SAMPLES_DIR / "mm_corner_market.json").read_text(encoding="utf-8"))
