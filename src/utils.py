"""Utilities for receipt identifiers and audit metadata."""

import uuid
from datetime import datetime, timezone


def new_receipt_id() -> str:
    """
    Mint an opaque receipt id: random UUID4 in canonical text form.
    122 random bits, so collisions stay negligible (~n^2 / 2^123 for n ids).
    Stateless; safe to call from any thread.
    """
    return str(uuid.uuid4())


def iso_now() -> str:
    """Current UTC timestamp as ISO string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
