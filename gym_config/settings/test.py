"""
gym_config/settings/test.py
─────────────────────────────────────────────────────────────────────
pytest-django settings: in-memory SQLite, local cache, eager Celery
"""
from .base import *  # noqa: F401, F403

DEBUG = False

ALLOWED_HOSTS = ["*"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME":   ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

SESSION_ENGINE = "django.contrib.sessions.backends.db"
EMAIL_BACKEND  = "django.core.mail.backends.locmem.EmailBackend"

STORAGES["staticfiles"] = {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"}  # noqa: F405

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

IDENTITY_PROVIDER_URL     = "https://identity.test"
IDENTITY_PROVIDER_API_KEY = "test-anon-key"
IDENTITY_SERVICE_KEY      = "test-service-key"

CELERY_TASK_ALWAYS_EAGER     = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL            = "memory://"
CELERY_RESULT_BACKEND        = "cache+memory://"

LOGGING["handlers"]["file"] = {"class": "logging.NullHandler"}  # noqa: F405
