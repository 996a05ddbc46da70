#!/usr/bin/env python3
"""
Repeatability harness: submit the same receipt N times concurrently; assert every
submission gets a distinct id and every id reads back the same points.
Exits 0 if stable, 1 if not. Runs against an in-process app (Flask test client).

Usage: python scripts/repeatability_check.py [--runs 100] [--workers 8] [--receipt path]
"""

import argparse
import json
import sys
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app import create_app
from receipt_processor.config import Settings

DEFAULT_RUNS = 100
DEFAULT_WORKERS = 8
DEFAULT_RECEIPT = "sample_receipts/target.json"


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--runs", type=int, default=DEFAULT_RUNS)
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS)
    parser.add_argument("--receipt", default=DEFAULT_RECEIPT)
    args = parser.parse_args()

    root = Path(__file__).resolve().parent.parent
    receipt_path = root / args.receipt
    if not receipt_path.exists():
        print(f"Error: Receipt file not found: {receipt_path}", file=sys.stderr)
        sys.exit(1)
    receipt = json.loads(receipt_path.read_text(encoding="utf-8"))

    with tempfile.TemporaryDirectory() as log_dir:
        app = create_app(Settings(log_dir=Path(log_dir), audit_enabled=False))

        def submit(_):
            with app.test_client() as client:
                resp = client.post("/receipts/process", json=receipt)
                receipt_id = resp.get_json()["id"]
                points = client.get(f"/receipts/{receipt_id}/points").get_json()["points"]
                return receipt_id, points

        print(f"Submitting {args.receipt} {args.runs} times ({args.workers} workers)...")
        with ThreadPoolExecutor(max_workers=args.workers) as pool:
            results = list(pool.map(submit, range(args.runs)))

    ids = [r[0] for r in results]
    points = {r[1] for r in results}
    variances = []
    if len(set(ids)) != len(ids):
        variances.append(f"duplicate ids: {len(ids) - len(set(ids))}")
    if len(points) != 1:
        variances.append(f"points differ across runs: {sorted(points)}")

    if variances:
        print("UNSTABLE")
        for v in variances:
            print(f"  - {v}")
        sys.exit(1)
    print(f"STABLE: {len(ids)} distinct ids, points={points.pop()}")


if __name__ == "__main__":
    main()
