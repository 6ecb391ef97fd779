"""
Closet Ledger – Django Settings (Infrastructure Only)
======================================================
Django provides the ORM, transactions, settings and management
commands. Ledger rules live in core/ and engines/, never here.

Environment:
    CLOSET_DB_ENGINE          django.db.backends.* (default sqlite3)
    CLOSET_DB_NAME            database name / sqlite path
    CLOSET_DB_USER, CLOSET_DB_PASSWORD, CLOSET_DB_HOST, CLOSET_DB_PORT
    CLOSET_LOG_LEVEL          level for the closet.* loggers (default INFO)
    LEDGER_MAX_CAS_ATTEMPTS   capital account write attempts (default 5)
    CONVENTION_RELEASE_DAYS   days after event end before auto-release (default 2)
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("CLOSET_SECRET_KEY", "closet-dev-key-replace-before-deployment")

DEBUG = os.environ.get("CLOSET_DEBUG", "0") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "core.ledger_store",
]

# ── Database ──────────────────────────────────────────────────
DATABASES = {
    "default": {
        "ENGINE": os.environ.get("CLOSET_DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("CLOSET_DB_NAME", str(BASE_DIR / "closet.sqlite3")),
        "USER": os.environ.get("CLOSET_DB_USER", ""),
        "PASSWORD": os.environ.get("CLOSET_DB_PASSWORD", ""),
        "HOST": os.environ.get("CLOSET_DB_HOST", ""),
        "PORT": os.environ.get("CLOSET_DB_PORT", ""),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
# Ledger tables declare their keys explicitly. This is a Django fallback only.
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Ledger ────────────────────────────────────────────────────
LEDGER_MAX_CAS_ATTEMPTS = int(os.environ.get("LEDGER_MAX_CAS_ATTEMPTS", "5"))
CONVENTION_RELEASE_DAYS = int(os.environ.get("CONVENTION_RELEASE_DAYS", "2"))

# ── Logging ───────────────────────────────────────────────────
# closet.ledger.inconsistency carries LedgerWriteFailed and reconciliation
# drift at ERROR, so it shows at any CLOSET_LOG_LEVEL up to ERROR.
CLOSET_LOG_LEVEL = os.environ.get("CLOSET_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "closet": {
            "level": CLOSET_LOG_LEVEL,
        },
    },
}
