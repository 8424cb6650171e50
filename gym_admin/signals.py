"""
signals.py
─────────────────────────────────────────────────────────────────────
Audit trail for member status / plan_end_date changes made through
model saves (API edits, renewals, the admin site).

The reconciler writes with queryset.update() and logs its own rows, so
nothing here fires for it.

Registered in apps.py:
    class GymAdminConfig(AppConfig):
        def ready(self):
            import gym_admin.signals  # noqa: F401
"""
from __future__ import annotations

import logging

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from .models import Member, MemberStatusLog

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Member)
def _cache_old_status(sender, instance, **kwargs):
    """Remember status and plan_end_date as stored before this save."""
    instance._old_values = None
    if instance.pk:
        instance._old_values = (
            Member.objects.filter(pk=instance.pk)
            .values("status", "plan_end_date")
            .first()
        )


@receiver(post_save, sender=Member)
def on_member_status_change(sender, instance: Member, created: bool, **kwargs):
    if created:
        return
    old = getattr(instance, "_old_values", None)
    if not old:
        return
    if old["status"] == instance.status and old["plan_end_date"] == instance.plan_end_date:
        return

    MemberStatusLog.objects.create(
        gym_id            = instance.gym_id,
        member            = instance,
        source            = MemberStatusLog.Source.ADMIN,
        reason            = getattr(instance, "_change_reason", "manual_edit"),
        old_status        = old["status"],
        new_status        = instance.status,
        old_plan_end_date = old["plan_end_date"],
        new_plan_end_date = instance.plan_end_date,
    )
    logger.info("[member] %s: %s → %s", instance.pk, old["status"], instance.status)
