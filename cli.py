#!/usr/bin/env python3
"""CLI for scoring receipt files offline with the same rules as the service."""

import argparse
import json
import sys
from pathlib import Path

import jsonschema

from receipt_processor.config import load_settings
from src.scoring import RuleEngine
from src.validation import validate_receipt


def _load_receipt(path: Path) -> dict:
    if not path.exists():
        print(f"Error: Receipt file not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        receipt = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {path}: {e}", file=sys.stderr)
        sys.exit(1)
    try:
        validate_receipt(receipt)
    except jsonschema.ValidationError as e:
        print(f"Error: {path} is not a valid receipt: {e.message}", file=sys.stderr)
        sys.exit(1)
    return receipt


def cmd_score(args: argparse.Namespace) -> None:
    """Score a receipt and print the per-rule breakdown."""
    receipt = _load_receipt(Path(args.receipt))
    generated_by_llm = args.generated_by_llm or load_settings().generated_by_llm
    breakdown = RuleEngine(generated_by_llm=generated_by_llm).breakdown(receipt)

    if args.json:
        print(json.dumps(breakdown, indent=2))
        return

    print("=== Points ===")
    for rule, points in breakdown.items():
        if rule in ("total", "purchase_time_valid"):
            continue
        print(f"  {rule.replace('_', ' ')}: {points}")
    if not breakdown["purchase_time_valid"]:
        print(f"  purchaseTime {receipt['purchaseTime']!r} is not HH:MM; receipt scores 0")
    print(f"Total: {breakdown['total']}")


def cmd_validate(args: argparse.Namespace) -> None:
    """Schema-check a receipt file."""
    _load_receipt(Path(args.receipt))
    print(f"{args.receipt}: OK")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Score purchase receipts")
    sub = parser.add_subparsers(dest="command", required=True)

    p_score = sub.add_parser("score", help="Score a receipt JSON file")
    p_score.add_argument("receipt", type=Path, help="Path to receipt JSON file")
    p_score.add_argument("--json", action="store_true", help="Output JSON")
    p_score.add_argument(
        "--generated-by-llm",
        action="store_true",
        help="Apply the generated-by-LLM bonus (or set GENERATED_BY_LLM in .env)",
    )
    p_score.set_defaults(func=cmd_score)

    p_validate = sub.add_parser("validate", help="Check a receipt JSON file against the schema")
    p_validate.add_argument("receipt", type=Path, help="Path to receipt JSON file")
    p_validate.set_defaults(func=cmd_validate)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
