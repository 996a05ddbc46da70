"""Schema validation for receipt payloads."""

import json
from pathlib import Path

import jsonschema

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"


def _load_schema(name: str) -> dict:
    path = SCHEMAS_DIR / f"{name}.schema.json"
    return json.loads(path.read_text(encoding="utf-8"))


def validate_receipt(data: dict) -> None:
    """Validate a receipt payload against schema. Raises jsonschema.ValidationError if invalid."""
    schema = _load_schema("receipt")
    jsonschema.validate(data, schema)
