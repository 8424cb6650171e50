"""
tests/test_tenant_scope.py
─────────────────────────────────────────────────────────────────────
TenantScope: construction rules, isolation, keyset paging.
"""
from __future__ import annotations

import uuid

import pytest

from gym_admin.exceptions import TenantRequiredError
from gym_admin.models import Member, Plan
from gym_admin.repository import TenantScope


class TestConstruction:

    @pytest.mark.parametrize("value", [None, "", "not-a-uuid"])
    def test_missing_or_invalid_tenant_rejected(self, value):
        with pytest.raises(TenantRequiredError):
            TenantScope(value)

    def test_string_id_normalised(self):
        gym_id = uuid.uuid4()
        assert TenantScope(str(gym_id)).gym_id == gym_id

    def test_user_without_gym(self):
        class Anonymous:
            gym_id = None
        with pytest.raises(TenantRequiredError):
            TenantScope.for_user(Anonymous())


@pytest.mark.django_db
class TestIsolation:

    def test_querysets_only_see_own_gym(self, scope, other_gym, make_member):
        mine = make_member("Mine")
        make_member("Theirs", target_gym=other_gym, plan=None)
        assert list(scope.members()) == [mine]

    def test_create_forces_gym(self, scope, other_gym):
        plan = scope.create(Plan, gym=other_gym, name="Sneaky", duration_in_months=1, price=10)
        assert plan.gym_id == scope.gym_id

    def test_gym_property(self, scope, gym):
        assert scope.gym == gym

    def test_member_pages(self, scope, make_member, make_payment):
        import datetime
        members = [make_member(f"M{i}") for i in range(5)]
        make_payment(members[0], 100, 100, datetime.date(2024, 1, 1))

        pages = list(scope.iter_member_pages(page_size=2))

        assert [len(p) for p in pages] == [2, 2, 1]
        flat = [m for page in pages for m in page]
        assert [m.pk for m in flat] == sorted(m.pk for m in members)
        assert len(flat[0].payments.all()) == 1
        assert all(isinstance(m, Member) for m in flat)

    def test_exact_multiple_of_page_size(self, scope, make_member):
        for i in range(4):
            make_member(f"M{i}")
        assert [len(p) for p in scope.iter_member_pages(page_size=2)] == [2, 2]
