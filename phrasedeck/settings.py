from __future__ import annotations

from pathlib import Path
import os

BASE_DIR = Path(__file__).resolve().parents[1]

DATABASE_URL = os.getenv("PHRASEDECK_DATABASE_URL", "sqlite:///./phrasedeck.db")

JWT_SECRET = os.getenv("PHRASEDECK_JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_MINUTES = int(os.getenv("PHRASEDECK_JWT_EXPIRE_MINUTES", "60"))
JWT_REFRESH_EXPIRE_DAYS = int(os.getenv("PHRASEDECK_JWT_REFRESH_EXPIRE_DAYS", "30"))

AUDIO_DIR = Path(os.getenv("PHRASEDECK_AUDIO_DIR", str(BASE_DIR / "audio")))

LOG_LEVEL = os.getenv("PHRASEDECK_LOG_LEVEL", "INFO").upper()

DEFAULT_PRIORITY = int(os.getenv("PHRASEDECK_DEFAULT_PRIORITY", "3"))

# Creates demo@phrasedeck.local with a known password on start-up.
SEED_DEMO = os.getenv("PHRASEDECK_SEED_DEMO", "0").lower() in ("1", "true", "yes")
