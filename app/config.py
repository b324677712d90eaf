"""Configuration for the CRM API (environment variables with defaults)."""

import os

# Comma-separated list of origins allowed to call the API (dashboard dev server by default).
CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]

# Load the demo customers and tickets when the app is created.
SEED_DEMO_DATA: bool = os.environ.get("SEED_DEMO_DATA", "1").lower() in ("1", "true", "yes", "on")

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

# Used by `python -m app.main`
API_HOST: str = os.environ.get("API_HOST", "127.0.0.1")
API_PORT: int = int(os.environ.get("API_PORT", "8000"))
