"""
Application configuration.
All values come from environment variables (a local .env file is loaded first).
"""

import os

from dotenv import load_dotenv

load_dotenv()

# ─── Database ─────────────────────────────────────────────────────────────────

POSTGRES_USER = os.getenv("POSTGRES_USER", "examgen_user")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "examgen_pass")
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_DB = os.getenv("POSTGRES_DB", "examgen")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

# ─── Auth ─────────────────────────────────────────────────────────────────────

JWT_SECRET = os.getenv("JWT_SECRET", "examgen-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", str(60 * 24 * 7)))

DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD")

# ─── Gemini (OpenAI-compatible API) ───────────────────────────────────────────

GEMINI_API_KEY = (os.getenv("GEMINI_API_KEY") or "").strip() or None
GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/"
)
GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.4"))
# 0 or unset: no explicit output cap
GEMINI_MAX_TOKENS = int(os.getenv("GEMINI_MAX_TOKENS", "0")) or None

# Newest / most capable first, legacy fallbacks last
DEFAULT_GEMINI_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.0-flash",
    "gemini-pro-latest",
    "gemini-flash-latest",
    "gemini-1.5-pro",
    "gemini-1.5-flash",
    "gemini-pro",
]
GEMINI_MODELS = [
    m.strip() for m in os.getenv("GEMINI_MODELS", "").split(",") if m.strip()
] or DEFAULT_GEMINI_MODELS

# ─── HTTP / logging ───────────────────────────────────────────────────────────

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
