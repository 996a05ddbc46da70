"""Audit trail and application logging for receipt submissions and lookups."""

import json
import logging
from pathlib import Path

from src.utils import iso_now

LOGGER_NAME = "receipt_processor"


def _ensure_log_dir(log_dir: Path) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def audit_log(
    log_dir: Path,
    action: str,
    status: str,
    *,
    receipt_id: str | None = None,
    points: int | None = None,
    error: str | None = None,
    extra: dict | None = None,
):
    """Append a structured audit entry to audit.log (JSONL)."""
    _ensure_log_dir(log_dir)
    entry = {
        "timestamp": iso_now(),
        "action": action,
        "status": status,
    }
    if receipt_id:
        entry["receipt_id"] = receipt_id
    if points is not None:
        entry["points"] = points
    if error:
        entry["error"] = error
    if extra:
        entry.update(extra)

    with open(log_dir / "audit.log", "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")


def setup_app_logging(log_dir: Path):
    """Configure application logging to console and file."""
    _ensure_log_dir(log_dir)
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG)

    fmt = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(ch)

    # File
    fh = logging.FileHandler(log_dir / "app.log", encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(fh)

    return logger
