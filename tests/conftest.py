"""
tests/conftest.py
─────────────────────────────────────────────────────────────────────
Shared fixtures: two gyms, one user per role, a plan/batch catalogue and
an API client logged in through the session (no identity provider).
"""
from __future__ import annotations

import datetime
import json
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.test import Client

from gym_admin.models import Batch, CustomUser, Gym, Member, Payment, Plan, Role
from gym_admin.repository import TenantScope


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


# ════════════════════════════════════════════════════════════════════
#  Tenants
# ════════════════════════════════════════════════════════════════════

@pytest.fixture
def gym(db):
    return Gym.objects.create(name="Iron Temple", country="IN")


@pytest.fixture
def other_gym(db):
    return Gym.objects.create(name="Flex Hub", country="IN")


@pytest.fixture
def scope(gym):
    return TenantScope(gym.pk)


@pytest.fixture
def other_scope(other_gym):
    return TenantScope(other_gym.pk)


# ════════════════════════════════════════════════════════════════════
#  Users
# ════════════════════════════════════════════════════════════════════

def _user(gym, role, email):
    return CustomUser.objects.create_user(email=email, name=role.title(), role=role, gym=gym)


@pytest.fixture
def admin_user(gym):
    return _user(gym, Role.ADMIN, "admin@irontemple.test")


@pytest.fixture
def staff_user(gym):
    return _user(gym, Role.STAFF, "staff@irontemple.test")


@pytest.fixture
def trainer_user(gym):
    return _user(gym, Role.TRAINER, "trainer@irontemple.test")


@pytest.fixture
def other_admin(other_gym):
    return _user(other_gym, Role.ADMIN, "admin@flexhub.test")


# ════════════════════════════════════════════════════════════════════
#  Catalogue + members
# ════════════════════════════════════════════════════════════════════

@pytest.fixture
def monthly_plan(gym):
    return Plan.objects.create(gym=gym, name="Monthly", duration_in_months=1, price=Decimal("1000"))


@pytest.fixture
def quarterly_plan(gym):
    return Plan.objects.create(gym=gym, name="Quarterly", duration_in_months=3, price=Decimal("2700"))


@pytest.fixture
def morning_batch(gym):
    return Batch.objects.create(gym=gym, name="Morning", schedule_time="06:00-08:00")


@pytest.fixture
def make_member(gym, monthly_plan):
    def _make(name="Asha", *, status=Member.Status.ACTIVE, plan=monthly_plan,
              join_date=datetime.date(2024, 1, 1), plan_end_date=datetime.date(2024, 2, 1),
              target_gym=None, **extra):
        return Member.objects.create(
            gym=target_gym or gym, name=name, phone="9000000000", status=status, plan=plan,
            join_date=join_date, plan_end_date=plan_end_date, **extra,
        )
    return _make


@pytest.fixture
def make_payment():
    def _make(member, total, paid, on, kind=Payment.Kind.PLAN_RENEWAL):
        return Payment.objects.create(
            gym_id=member.gym_id, member=member, total_amount=Decimal(total),
            amount_paid=Decimal(paid), payment_date=on, payment_kind=kind,
        )
    return _make


# ════════════════════════════════════════════════════════════════════
#  API clients
# ════════════════════════════════════════════════════════════════════

class JsonClient(Client):
    """Django test client that sends JSON bodies."""

    def _json(self, method, path, data=None, **extra):
        body = json.dumps(data) if data is not None else ""
        return getattr(super(), method)(path, body, content_type="application/json", **extra)

    def post(self, path, data=None, **extra):
        return self._json("post", path, data, **extra)

    def put(self, path, data=None, **extra):
        return self._json("put", path, data, **extra)

    def patch(self, path, data=None, **extra):
        return self._json("patch", path, data, **extra)

    def delete(self, path, data=None, **extra):
        return self._json("delete", path, data, **extra)


@pytest.fixture
def api_client(db):
    return JsonClient()


@pytest.fixture
def client_for(db):
    def _login(user):
        client = JsonClient()
        client.force_login(user)
        return client
    return _login
