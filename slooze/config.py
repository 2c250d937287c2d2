"""
Centralised configuration constants and environment helpers.
"""

import os
import sys

from dotenv import load_dotenv

load_dotenv()

# ── Storage ──────────────────────────────────────────────────────────
STORAGE_URI = os.getenv("SLOOZE_STORAGE_URI", "sqlite:///slooze.db")
SESSION_STORAGE_KEY = "user"

# ── Authentication ───────────────────────────────────────────────────
# Simulated network latency for every login attempt, success or not.
LOGIN_DELAY_SECONDS = int(os.getenv("LOGIN_DELAY_MS", "800")) / 1000

# ── Catalog ──────────────────────────────────────────────────────────
PRODUCT_CATEGORIES = ("Grains", "Energy", "Metals", "Agricultural", "Livestock")
PRODUCT_SORT_FIELDS = ("name", "category", "price", "stock")
LOW_STOCK_THRESHOLD = 100

# ── API server ───────────────────────────────────────────────────────
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
TOKEN_EXPIRY_HOURS = int(os.getenv("TOKEN_EXPIRY_HOURS", "24"))


def get_env(name: str) -> str:
    """Return an environment variable or exit with an error message."""
    value = os.getenv(name)
    if not value:
        print(f"ERROR: env var {name} is not set", file=sys.stderr)
        sys.exit(1)
    return value
