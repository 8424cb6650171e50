"""
gym_admin/tasks.py
─────────────────────────────────────────────────────────────────────
Celery background tasks. Schedule lives in gym_config/celery.py:

    'reconcile-member-status-daily'  → reconcile_all_gyms_task   00:00 daily
    'prune-status-logs-monthly'      → prune_status_logs_task    03:00 on the 1st

Each gym is reconciled in its own task so one tenant's failure or
slowness never holds up the others.
"""

from __future__ import annotations

import datetime
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 1. Reconcile one gym
# ─────────────────────────────────────────────────────────────────────
@shared_task(bind=True, max_retries=3, default_retry_delay=300)
def reconcile_gym_task(self, gym_id, dry_run=False):
    """Status sweep for a single gym. Safe to retry: the rules are idempotent."""
    from .exceptions import TenantSweepError
    from .services.membership_service import reconcile_gym
    try:
        result = reconcile_gym(gym_id, dry_run=dry_run)
    except TenantSweepError as exc:
        logger.exception("[reconcile] gym=%s sweep aborted", gym_id)
        raise self.retry(exc=exc)

    logger.info("[reconcile] gym=%s checked:%d updated:%d failed:%d timed_out:%s",
                gym_id, result.total_checked, result.total_updated,
                len(result.failed_members), result.timed_out)
    return {
        "gym_id":    str(gym_id),
        "checked":   result.total_checked,
        "updated":   result.total_updated,
        "failed":    len(result.failed_members),
        "timed_out": result.timed_out,
    }


# ─────────────────────────────────────────────────────────────────────
# 2. Fan out over every gym with automatic checks on (daily)
# ─────────────────────────────────────────────────────────────────────
@shared_task
def reconcile_all_gyms_task():
    """Queues reconcile_gym_task for each gym whose auto_inactive_members is set."""
    from .models import Gym
    gym_ids = list(
        Gym.objects.filter(auto_inactive_members=True).values_list("pk", flat=True)
    )
    for gym_id in gym_ids:
        reconcile_gym_task.delay(str(gym_id))
    logger.info("[reconcile] queued %d gym sweeps", len(gym_ids))
    return {"queued": len(gym_ids)}


# ─────────────────────────────────────────────────────────────────────
# 3. Drop old status audit rows (first of every month)
# ─────────────────────────────────────────────────────────────────────
@shared_task(bind=True, max_retries=2)
def prune_status_logs_task(self, days=None):
    """Deletes MemberStatusLog rows older than STATUS_LOG_RETENTION_DAYS."""
    from django.conf import settings
    from django.db import DatabaseError
    from django.utils import timezone
    from .models import MemberStatusLog
    days = settings.STATUS_LOG_RETENTION_DAYS if days is None else days
    try:
        cutoff = timezone.now() - datetime.timedelta(days=days)
        deleted, _ = MemberStatusLog.objects.filter(created_at__lt=cutoff).delete()
        logger.info("[prune] %d status log rows older than %d days removed", deleted, days)
        return {"deleted": deleted}
    except DatabaseError as exc:
        logger.exception("[prune] status log cleanup failed")
        raise self.retry(exc=exc)
