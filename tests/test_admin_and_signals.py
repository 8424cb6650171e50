"""
tests/test_admin_and_signals.py
─────────────────────────────────────────────────────────────────────
Audit rows from model saves and the Django admin screens.
"""
from __future__ import annotations

import datetime

import pytest
from django.test import Client

from gym_admin.models import CustomUser, Member, MemberStatusLog

pytestmark = pytest.mark.django_db


class TestStatusAuditSignal:

    def test_create_is_not_logged(self, make_member):
        make_member()
        assert not MemberStatusLog.objects.exists()

    def test_status_change_logged(self, make_member):
        member = make_member()
        member.status = Member.Status.INACTIVE
        member.save()

        log = MemberStatusLog.objects.get()
        assert log.gym_id == member.gym_id
        assert log.reason == "manual_edit"
        assert (log.old_status, log.new_status) == ("active", "inactive")

    def test_plan_end_change_logged(self, make_member):
        member = make_member()
        member.plan_end_date = datetime.date(2024, 5, 1)
        member.save()

        log = MemberStatusLog.objects.get()
        assert log.old_plan_end_date == datetime.date(2024, 2, 1)
        assert log.new_plan_end_date == datetime.date(2024, 5, 1)

    def test_unrelated_edit_not_logged(self, make_member):
        member = make_member()
        member.phone = "1234"
        member.save()
        assert not MemberStatusLog.objects.exists()


class TestAdminSite:

    @pytest.fixture
    def admin_client(self, db):
        root = CustomUser.objects.create_superuser(email="root@ops.test", password="pw", name="Root")
        client = Client()
        client.force_login(root)
        return client

    @pytest.mark.parametrize("model", ["gym", "customuser", "member", "payment", "memberstatuslog",
                                       "plan", "batch", "staff", "expense", "enquiry", "attendance"])
    def test_changelists_render(self, admin_client, gym, model):
        assert admin_client.get(f"/admin/gym_admin/{model}/").status_code == 200

    def test_status_check_action(self, admin_client, gym, make_member):
        member = make_member(plan_end_date=datetime.date(2020, 1, 1))

        resp = admin_client.post("/admin/gym_admin/gym/", {
            "action": "run_status_check", "_selected_action": [str(gym.pk)],
        })

        assert resp.status_code == 302
        member.refresh_from_db()
        assert member.status == Member.Status.INACTIVE
