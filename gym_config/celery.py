"""
gym_config/celery.py
─────────────────────────────────────────────────────────────────────
Celery application configuration + beat schedule
"""
import os

from celery import Celery
from celery.schedules import crontab

# read from the environment; falls back to development settings
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gym_config.settings.development")

app = Celery("gym_admin")

# Read config from Django settings (CELERY_* keys)
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks in all INSTALLED_APPS
app.autodiscover_tasks()


# ── Periodic Task Schedule ────────────────────────────────────────────
app.conf.beat_schedule = {
    # membership status reconciliation for gyms with automation on, daily at midnight
    "reconcile-member-status-daily": {
        "task":     "gym_admin.tasks.reconcile_all_gyms_task",
        "schedule": crontab(hour=0, minute=0),
    },
    # drop stale status audit rows on the first of every month
    "prune-status-logs-monthly": {
        "task":     "gym_admin.tasks.prune_status_logs_task",
        "schedule": crontab(day_of_month=1, hour=3, minute=0),
    },
}
