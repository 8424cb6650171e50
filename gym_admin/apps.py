"""
apps.py  —  App configuration with signal registration
"""
from django.apps import AppConfig


class GymAdminConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name               = "gym_admin"
    verbose_name       = "Gym Administration"

    def ready(self):
        import gym_admin.signals  # noqa: F401
