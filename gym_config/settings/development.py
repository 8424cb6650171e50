"""
gym_config/settings/development.py
─────────────────────────────────────────────────────────────────────
Local development settings
"""
from .base import *  # noqa: F401, F403

DEBUG = True

ALLOWED_HOSTS = ["*"]

# ── Database ──────────────────────────────────────────────────────────
import os
if os.environ.get("DATABASE_URL"):
    import dj_database_url
    DATABASES = {"default": dj_database_url.config(conn_max_age=600)}
# without DATABASE_URL the SQLite database from base.py is used

# ── Session: DB-backed, Redis may be absent ───────────────────────────
SESSION_ENGINE = "django.contrib.sessions.backends.db"

# ── Cache: in-memory in development ───────────────────────────────────
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# ── Email: print OTPs to the console ──────────────────────────────────
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

# ── Static files served by Django in dev ──────────────────────────────
STORAGES["staticfiles"] = {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"}  # noqa: F405

# ── Logging: show everything in development ───────────────────────────
LOGGING["root"]["level"] = "DEBUG"                  # noqa: F405
LOGGING["loggers"]["gym_admin"]["level"] = "DEBUG"  # noqa: F405
