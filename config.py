"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
DATABASE_HOST: str = os.getenv("DATABASE_HOST", "localhost")
DATABASE_PORT: int = int(os.getenv("DATABASE_PORT", "5432"))
DATABASE_NAME: str = os.getenv("DATABASE_NAME", "")
DATABASE_USERNAME: str = os.getenv("DATABASE_USERNAME", "")
DATABASE_PASSWORD: str = os.getenv("DATABASE_PASSWORD", "")

# ── Connection pool ───────────────────────────────────────
POOL_MAX_CONNECTIONS: int = 20
POOL_IDLE_TIMEOUT_MS: int = 30000

# Delay between two connection attempts; retries never stop.
CONNECT_RETRY_DELAY_MS: int = 3000

# ── Schema ────────────────────────────────────────────────
# Order matters: later tables reference earlier ones.
REQUIRED_TABLES: list[str] = ["Account", "Game", "Stream"]

# ── Games ─────────────────────────────────────────────────
GUID_LENGTH: int = 6

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
