"""Shared configuration and environment setup."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from coursetracker.storage import default_data_path
from coursetracker.tracker import DEFAULT_PAGE_SIZE

load_dotenv()

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """
    Runtime settings. Environment variables (or a .env file) provide the
    defaults, CLI flags override them.
    """

    data_file: Path
    api_url: Optional[str] = None
    api_db: Optional[Path] = None
    page_size: int = DEFAULT_PAGE_SIZE
    timeout: float = 10.0
    seed_demo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        data_file = os.getenv("COURSETRACKER_DATA_FILE")
        api_db = os.getenv("COURSETRACKER_API_DB")
        return cls(
            data_file=Path(data_file) if data_file else default_data_path(),
            api_url=os.getenv("COURSETRACKER_API_URL") or None,
            api_db=Path(api_db) if api_db else None,
            page_size=_int_env("COURSETRACKER_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            timeout=_float_env("COURSETRACKER_TIMEOUT", 10.0),
            seed_demo=os.getenv("COURSETRACKER_SEED_DEMO", "").strip().lower() in _TRUE,
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
