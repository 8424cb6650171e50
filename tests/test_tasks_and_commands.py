"""
tests/test_tasks_and_commands.py
─────────────────────────────────────────────────────────────────────
Celery tasks (eager in test settings) and the check_member_status
management command.
"""
from __future__ import annotations

import datetime
from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from django.db import DatabaseError
from django.utils import timezone

from gym_admin import tasks
from gym_admin.exceptions import TenantSweepError
from gym_admin.models import Gym, Member, MemberStatusLog
from gym_admin.services import membership_service

D = datetime.date
LONG_AGO = D(2020, 1, 1)

pytestmark = pytest.mark.django_db


# ════════════════════════════════════════════════════════════════════
#  Celery tasks
# ════════════════════════════════════════════════════════════════════

class TestReconcileTasks:

    def test_single_gym_task(self, gym, make_member):
        make_member(plan_end_date=LONG_AGO)

        result = tasks.reconcile_gym_task(str(gym.pk))

        assert result == {"gym_id": str(gym.pk), "checked": 1, "updated": 1,
                          "failed": 0, "timed_out": False}
        assert Member.objects.get().status == Member.Status.INACTIVE

    def test_dry_run_task(self, gym, make_member):
        make_member(plan_end_date=LONG_AGO)
        result = tasks.reconcile_gym_task(str(gym.pk), dry_run=True)
        assert result["updated"] == 1
        assert Member.objects.get().status == Member.Status.ACTIVE

    def test_fan_out_skips_gyms_with_automation_off(self, gym, other_gym, make_member):
        other_gym.auto_inactive_members = False
        other_gym.save()
        mine = make_member("Mine", plan_end_date=LONG_AGO)
        theirs = make_member("Theirs", target_gym=other_gym, plan=None, plan_end_date=LONG_AGO)

        result = tasks.reconcile_all_gyms_task()

        assert result == {"queued": 1}
        mine.refresh_from_db()
        theirs.refresh_from_db()
        assert mine.status == Member.Status.INACTIVE
        assert theirs.status == Member.Status.ACTIVE

    def test_sweep_failure_is_retried(self, gym, monkeypatch):
        def broken(gym_id, **kwargs):
            raise TenantSweepError(gym_id, DatabaseError("connection reset"))

        retried = {}

        def fake_retry(exc=None, **kwargs):
            retried["exc"] = exc
            return RuntimeError("retry scheduled")

        monkeypatch.setattr(membership_service, "reconcile_gym", broken)
        monkeypatch.setattr(tasks.reconcile_gym_task, "retry", fake_retry)

        with pytest.raises(RuntimeError, match="retry scheduled"):
            tasks.reconcile_gym_task(str(gym.pk))
        assert isinstance(retried["exc"], TenantSweepError)


class TestPruneTask:

    def test_old_rows_removed(self, gym, make_member):
        member = make_member()
        old = MemberStatusLog.objects.create(gym=gym, member=member, source="admin",
                                             old_status="active", new_status="inactive")
        fresh = MemberStatusLog.objects.create(gym=gym, member=member, source="admin",
                                               old_status="inactive", new_status="active")
        MemberStatusLog.objects.filter(pk=old.pk).update(
            created_at=timezone.now() - datetime.timedelta(days=400),
        )

        result = tasks.prune_status_logs_task()

        assert result == {"deleted": 1}
        assert list(MemberStatusLog.objects.values_list("pk", flat=True)) == [fresh.pk]

    def test_custom_window(self, gym, make_member):
        member = make_member()
        log = MemberStatusLog.objects.create(gym=gym, member=member, source="admin", new_status="active")
        MemberStatusLog.objects.filter(pk=log.pk).update(
            created_at=timezone.now() - datetime.timedelta(days=10),
        )
        assert tasks.prune_status_logs_task(days=5) == {"deleted": 1}


# ════════════════════════════════════════════════════════════════════
#  Management command
# ════════════════════════════════════════════════════════════════════

def _call(*args):
    out = StringIO()
    call_command("check_member_status", *args, stdout=out)
    return out.getvalue()


class TestCheckMemberStatusCommand:

    def test_single_gym_with_date(self, gym, make_member, make_payment):
        member = make_member()
        make_payment(member, 1000, 1000, D(2024, 1, 5))

        output = _call("--gym", str(gym.pk), "--date", "2024-02-15")

        member.refresh_from_db()
        assert member.plan_end_date == D(2024, 3, 1)
        assert "updated 1" in output
        assert "plan ends 2024-03-01" in output

    def test_dry_run_changes_nothing(self, gym, make_member):
        make_member(plan_end_date=LONG_AGO)
        output = _call("--gym", str(gym.pk), "--dry-run")
        assert "[DRY-RUN]" in output
        assert Member.objects.get().status == Member.Status.ACTIVE

    def test_all_gyms_respects_switch(self, gym, other_gym, make_member):
        other_gym.auto_inactive_members = False
        other_gym.save()
        make_member("Mine", plan_end_date=LONG_AGO)
        make_member("Theirs", target_gym=other_gym, plan=None, plan_end_date=LONG_AGO)

        _call("--all")

        assert Member.objects.get(name="Mine").status == Member.Status.INACTIVE
        assert Member.objects.get(name="Theirs").status == Member.Status.ACTIVE

    def test_all_with_nothing_enabled(self, gym):
        Gym.objects.update(auto_inactive_members=False)
        assert "No gyms" in _call("--all")

    def test_one_failing_gym_does_not_stop_others(self, gym, other_gym, make_member, monkeypatch):
        make_member("Mine", plan_end_date=LONG_AGO)
        make_member("Theirs", target_gym=other_gym, plan=None, plan_end_date=LONG_AGO)
        real = membership_service.reconcile_gym

        def flaky(gym_id, **kwargs):
            if str(gym_id) == str(gym.pk):
                raise TenantSweepError(gym_id, DatabaseError("timeout"))
            return real(gym_id, **kwargs)

        monkeypatch.setattr("gym_admin.management.commands.check_member_status.reconcile_gym", flaky)

        output = _call("--all")

        assert "Failed gyms: 1" in output
        assert Member.objects.get(name="Theirs").status == Member.Status.INACTIVE
        assert Member.objects.get(name="Mine").status == Member.Status.ACTIVE

    def test_bad_date(self, gym):
        with pytest.raises(CommandError):
            _call("--gym", str(gym.pk), "--date", "15-02-2024")

    def test_bad_gym_id(self):
        with pytest.raises(CommandError):
            _call("--gym", "not-a-uuid")

    def test_target_required(self):
        with pytest.raises(CommandError):
            _call()
