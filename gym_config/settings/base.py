"""
gym_config/settings/base.py
─────────────────────────────────────────────────────────────────────
Settings shared by every environment (dev / test / production)
"""
import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────────────
# BASE_DIR = .../gym_admin_project/
BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get("SECRET_KEY", "django-insecure-change-this-in-production")
DEBUG      = os.environ.get("DEBUG", "False") == "True"

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")


# ── Application Definition ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third-party
    "django_celery_beat",
    "django_celery_results",
    # GymAdminConfig registers the signals
    "gym_admin.apps.GymAdminConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",   # admin static files in production
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    # Bearer tokens override the session user for /api/ requests
    "gym_admin.middleware.BearerTokenAuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "gym_config.urls"

# ── Templates (admin only) ────────────────────────────────────────────
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS":    [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "gym_config.wsgi.application"


# ── Database ──────────────────────────────────────────────────────────
# Development uses SQLite; Production overrides this via DATABASE_URL
DATABASES = {
    "default": {
        "ENGINE":  "django.db.backends.sqlite3",
        "NAME":    BASE_DIR / "db.sqlite3",
    }
}


# ── Auth ──────────────────────────────────────────────────────────────
AUTH_USER_MODEL = "gym_admin.CustomUser"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]


# ── Internationalization ──────────────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE     = os.environ.get("TIME_ZONE", "Asia/Kolkata")
USE_I18N      = True
USE_TZ        = True


# ── Static ────────────────────────────────────────────────────────────
STATIC_URL  = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"        # ← collectstatic output (gitignored)

STORAGES = {
    "default":     {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}


# ── Default PK ────────────────────────────────────────────────────────
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# ── Celery ────────────────────────────────────────────────────────────
CELERY_BROKER_URL         = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND     = os.environ.get("CELERY_RESULT_BACKEND", "django-db")
CELERY_BEAT_SCHEDULER     = "django_celery_beat.schedulers:DatabaseScheduler"
CELERY_TIMEZONE           = TIME_ZONE
CELERY_TASK_SERIALIZER    = "json"
CELERY_RESULT_SERIALIZER  = "json"
CELERY_ACCEPT_CONTENT     = ["json"]


# ── Cache (Redis) ─────────────────────────────────────────────────────
# Also backs pending registrations (OTP) and token lookups.
CACHES = {
    "default": {
        "BACKEND":  "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_CACHE_URL", "redis://localhost:6379/1"),
    }
}


# ── Email (OTP delivery) ──────────────────────────────────────────────
EMAIL_BACKEND       = os.environ.get("EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend")
EMAIL_HOST          = os.environ.get("EMAIL_HOST", "localhost")
EMAIL_PORT          = int(os.environ.get("EMAIL_PORT", "587"))
EMAIL_HOST_USER     = os.environ.get("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS       = os.environ.get("EMAIL_USE_TLS", "True") == "True"
DEFAULT_FROM_EMAIL  = os.environ.get("DEFAULT_FROM_EMAIL", "no-reply@gym-admin.local")


# ── Identity Provider ─────────────────────────────────────────────────
# External auth service (token issuance, password storage).
IDENTITY_PROVIDER_URL     = os.environ.get("IDENTITY_PROVIDER_URL", "http://localhost:9999")
IDENTITY_PROVIDER_API_KEY = os.environ.get("IDENTITY_PROVIDER_API_KEY", "")
IDENTITY_SERVICE_KEY      = os.environ.get("IDENTITY_SERVICE_KEY", "")
IDENTITY_TIMEOUT_SECONDS  = int(os.environ.get("IDENTITY_TIMEOUT_SECONDS", "15"))
IDENTITY_CACHE_SECONDS    = int(os.environ.get("IDENTITY_CACHE_SECONDS", "60"))


# ── Registration ──────────────────────────────────────────────────────
OTP_TTL_SECONDS = int(os.environ.get("OTP_TTL_SECONDS", "600"))   # 10 minutes


# ── Membership Reconciler ─────────────────────────────────────────────
RECONCILE_PAGE_SIZE           = int(os.environ.get("RECONCILE_PAGE_SIZE", "200"))
RECONCILE_TIME_BUDGET_SECONDS = int(os.environ.get("RECONCILE_TIME_BUDGET_SECONDS", "600"))
STATUS_LOG_RETENTION_DAYS     = int(os.environ.get("STATUS_LOG_RETENTION_DAYS", "365"))


# ── API ───────────────────────────────────────────────────────────────
API_PAGE_SIZE     = 10
API_MAX_PAGE_SIZE = 100


# ── Logging ───────────────────────────────────────────────────────────
LOG_DIR = Path(os.environ.get("LOG_DIR", BASE_DIR / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {"format": "{levelname} {asctime} {module} {message}", "style": "{"},
        "simple":  {"format": "{levelname} {message}", "style": "{"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
        "file":    {
            "class":     "logging.handlers.RotatingFileHandler",
            "filename":  LOG_DIR / "django.log",
            "maxBytes":  1024 * 1024 * 10,  # 10 MB
            "backupCount": 5,
            "formatter": "verbose",
        },
    },
    "root": {"handlers": ["console"], "level": "INFO"},
    "loggers": {
        "django":    {"handlers": ["console", "file"], "level": "WARNING", "propagate": False},
        "gym_admin": {"handlers": ["console", "file"], "level": "INFO",    "propagate": False},
    },
}
