import os

from dotenv import load_dotenv
from sqlalchemy.engine import make_url

# Load .env file with explicit UTF-8 encoding
load_dotenv(encoding="utf-8")


def _normalize_database_url(url: str) -> str:
    # sqlite:// and sqlite:///relative.db must keep their slashes
    return make_url(url.strip()).render_as_string(hide_password=False)


def _parse_category_windows(raw: str | None) -> dict[str, int]:
    """
    "POOL:15,SPA:7" -> {"POOL": 15, "SPA": 7}
    """
    if not raw:
        return {"POOL": 15}

    windows: dict[str, int] = {}
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        category, _, days = chunk.partition(":")
        try:
            windows[category.strip().upper()] = int(days)
        except ValueError:
            raise ValueError(f"Invalid RESTRICTED_CATEGORY_WINDOWS entry: {chunk!r}") from None
    return windows


DATABASE_URL = _normalize_database_url(os.getenv("DATABASE_URL") or "sqlite:///./roomly.db")

CORS_ORIGINS = [
    o.strip()
    for o in (
        os.getenv("CORS_ORIGINS")
        or "http://localhost:3000,https://localhost:3000,http://127.0.0.1:3000,https://127.0.0.1:3000"
    ).split(",")
    if o.strip()
]

# category -> minimum days between two ACTIVE bookings by the same user
RESTRICTED_CATEGORY_WINDOWS = _parse_category_windows(os.getenv("RESTRICTED_CATEGORY_WINDOWS"))

# "local" writes under STORAGE_ROOT and is served by the app, "gcs" uploads to GCS_BUCKET_NAME
STORAGE_BACKEND = (os.getenv("STORAGE_BACKEND") or "local").strip().lower()
GCS_BUCKET_NAME = os.getenv("GCS_BUCKET_NAME")

STORAGE_ROOT = os.getenv("STORAGE_ROOT") or "./uploads"
STORAGE_PUBLIC_URL = (os.getenv("STORAGE_PUBLIC_URL") or "http://localhost:8001/uploads").rstrip("/")

RECONCILE_CRON = os.getenv("RECONCILE_CRON") or "0 3 * * *"
RECONCILE_TIMEZONE = os.getenv("RECONCILE_TIMEZONE") or "UTC"
