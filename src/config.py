"""Constants and paths for the letterboxd sync."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths ────────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
CONTENT_DIR = PROJECT_ROOT / "src" / "content"
MOVIES_DIR = Path(os.getenv("MOVIES_DIR", str(CONTENT_DIR / "movies")))
RECORD_EXTENSION = ".md"

# ── Letterboxd ───────────────────────────────────────────────────────────────
LETTERBOXD_USERNAME = os.getenv("LETTERBOXD_USERNAME", "Woogles")
LETTERBOXD_RSS_URL_TEMPLATE = "https://letterboxd.com/{username}/rss/"
LETTERBOXD_NAMESPACE = "https://letterboxd.com"
LETTERBOXD_TIMEOUT = float(os.getenv("LETTERBOXD_TIMEOUT", "30"))

# ── Front matter keys managed by the sync ────────────────────────────────────
LETTERBOXD_ID_KEY = "letterboxdId"
PLACEHOLDER_BODY = "test"  # bodies equal to this (any case) count as empty


@dataclass(frozen=True)
class SyncConfig:
    """Settings for one sync run."""

    username: str
    movies_dir: Path
    timeout: float = LETTERBOXD_TIMEOUT

    @classmethod
    def from_env(cls) -> SyncConfig:
        return cls(
            username=LETTERBOXD_USERNAME,
            movies_dir=MOVIES_DIR,
            timeout=LETTERBOXD_TIMEOUT,
        )
