"""Process settings, read once from the environment (and .env) at startup."""

import os
from pathlib import Path
from typing import NamedTuple

from dotenv import load_dotenv

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}


class Settings(NamedTuple):
    generated_by_llm: bool = False
    host: str = "127.0.0.1"
    port: int = 8080
    log_dir: Path = DEFAULT_LOG_DIR
    audit_enabled: bool = True


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Strict boolean parse. Unset or unrecognized values fall back to default."""
    if value is None:
        return default
    value = value.strip()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    return default


def load_settings(env: dict | None = None) -> Settings:
    """Snapshot settings. Pass env to bypass os.environ and .env (tests)."""
    if env is None:
        load_dotenv()
        env = os.environ
    port = env.get("PORT", "").strip()
    return Settings(
        generated_by_llm=parse_bool(env.get("GENERATED_BY_LLM")),
        host=env.get("HOST", "").strip() or "127.0.0.1",
        port=int(port) if port else 8080,
        log_dir=Path(env["LOG_DIR"]) if env.get("LOG_DIR") else DEFAULT_LOG_DIR,
        audit_enabled=parse_bool(env.get("AUDIT_LOG"), default=True),
    )
