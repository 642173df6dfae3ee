"""
Centralized configuration for all environments.

Select a config by setting:
  APP_CONFIG=ideaboard.config.DevConfig      # local dev
  APP_CONFIG=ideaboard.config.ProdConfig     # production (default if unset)
  APP_CONFIG=ideaboard.config.TestConfig     # pytest

Notes:
- SECRET_KEY is read from FLASK_SECRET_KEY
- Rate limiting uses Flask-Limiter v3 keys (RATELIMIT_*).
"""

from __future__ import annotations
import os
import secrets


class BaseConfig:
    # Generate a random key if env var is missing so dev/test never runs with
    # an empty string (production enforces a real key at startup)
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY") or secrets.token_hex(32)
    DEBUG = False
    TESTING = False

    # Cookies only carry flash messages and the CSRF token
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Third-party keys (completion API used for moderation)
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")

    # Supabase (hosted database for ideas)
    SUPABASE_URL = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
    SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

    # Content moderation
    MODERATION_ENABLED = os.getenv("MODERATION_ENABLED", "true").lower() == "true"
    MODERATION_TEMPERATURE = float(os.getenv("MODERATION_TEMPERATURE", "0.3"))
    MODERATION_MAX_TOKENS = int(os.getenv("MODERATION_MAX_TOKENS", "200"))

    # Seconds a client must wait between two accepted submissions
    SUBMISSION_COOLDOWN_SECONDS = int(os.getenv("SUBMISSION_COOLDOWN_SECONDS", "60"))

    # Flask-Limiter v3
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "60 per minute; 2000 per day")
    RATELIMIT_SUBMIT = os.getenv("RATELIMIT_SUBMIT", "5 per minute; 50 per day")
    RATELIMIT_MODERATE = os.getenv("RATELIMIT_MODERATE", "20 per minute; 300 per day")

    # Request bodies are small JSON/form posts
    MAX_CONTENT_LENGTH = 64 * 1024

    # Misc
    PREFERRED_URL_SCHEME = os.getenv("PREFERRED_URL_SCHEME", "https")
    SEND_FILE_MAX_AGE_DEFAULT = int(os.getenv("SEND_FILE_MAX_AGE_DEFAULT", "3600"))


class ProdConfig(BaseConfig):
    """Production settings (selected by default if APP_CONFIG is unset)."""
    pass


class DevConfig(BaseConfig):
    """Developer-friendly settings."""
    DEBUG = True
    TEMPLATES_AUTO_RELOAD = True
    SEND_FILE_MAX_AGE_DEFAULT = 0
    PREFERRED_URL_SCHEME = "http"
    # Allow cookies over HTTP in dev
    SESSION_COOKIE_SECURE = False
    SUBMISSION_COOLDOWN_SECONDS = 5


class TestConfig(BaseConfig):
    """CI/pytest settings."""
    TESTING = True
    DEBUG = True
    # Disable the limiter and CSRF tokens so tests can post forms directly
    RATELIMIT_ENABLED = False
    WTF_CSRF_ENABLED = False
    SESSION_COOKIE_SECURE = False
    TEMPLATES_AUTO_RELOAD = True
    SEND_FILE_MAX_AGE_DEFAULT = 0
    # Tests inject their own fakes; never reach the network
    SUPABASE_URL = ""
    SUPABASE_ANON_KEY = ""
    SUPABASE_SERVICE_ROLE_KEY = ""
    OPENAI_API_KEY = ""
    GEMINI_API_KEY = ""
