"""Application configuration."""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DB_PATH = BASE_DIR / "data" / "fund_tracker.db"
DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite+aiosqlite:///{DB_PATH}"

# Optional remote key-value store, tried before the local table when set
REMOTE_STORE_URL = os.getenv("REMOTE_STORE_URL", "")
REMOTE_STORE_TOKEN = os.getenv("REMOTE_STORE_TOKEN", "")

# mfapi.in (Indian mutual fund NAVs)
MFAPI_BASE_URL = os.getenv("MFAPI_BASE_URL", "https://api.mfapi.in/mf")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

# Cache settings (in-memory)
NAV_CACHE_TTL = 900  # seconds
SEARCH_CACHE_TTL = 3600  # seconds

# Fund search
SEARCH_MIN_QUERY_LENGTH = 3
SEARCH_MAX_RESULTS = 15

# Auth
PIN_LENGTH = 4

# Daily NAV refresh (AMCs publish NAVs late in the evening, IST)
NAV_REFRESH_HOUR = int(os.getenv("NAV_REFRESH_HOUR", "23"))
NAV_REFRESH_MINUTE = int(os.getenv("NAV_REFRESH_MINUTE", "30"))

# Ensure data directory exists (only needed for local SQLite, skip if DATABASE_URL is overridden)
if not os.getenv("DATABASE_URL"):
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
