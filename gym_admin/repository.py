"""
repository.py
─────────────────────────────────────────────────────────────────────
TenantScope: the only way services reach tenant-owned rows.

A scope cannot be built without a gym id, and every queryset it hands
out is already filtered on that gym, so a service cannot read or write
another tenant's data by forgetting a filter.
"""

from __future__ import annotations

import uuid
from typing import Iterator, List

from django.db.models import Prefetch, QuerySet

from .exceptions import TenantRequiredError
from .models import (
    Attendance,
    Batch,
    Enquiry,
    Expense,
    Gym,
    Member,
    MemberStatusLog,
    Payment,
    Plan,
    Service,
    Staff,
)


class TenantScope:

    def __init__(self, gym_id):
        if gym_id in (None, ""):
            raise TenantRequiredError("A gym id is required for tenant-scoped access")
        if not isinstance(gym_id, uuid.UUID):
            try:
                gym_id = uuid.UUID(str(gym_id))
            except ValueError:
                raise TenantRequiredError(f"Invalid gym id: {gym_id!r}")
        self.gym_id = gym_id

    def __repr__(self):
        return f"<TenantScope gym={self.gym_id}>"

    @classmethod
    def for_user(cls, user) -> "TenantScope":
        return cls(getattr(user, "gym_id", None))

    @property
    def gym(self) -> Gym:
        return Gym.objects.get(pk=self.gym_id)

    # ── Querysets ────────────────────────────────────────────────────
    def members(self) -> QuerySet:
        return Member.objects.filter(gym_id=self.gym_id)

    def plans(self) -> QuerySet:
        return Plan.objects.filter(gym_id=self.gym_id)

    def batches(self) -> QuerySet:
        return Batch.objects.filter(gym_id=self.gym_id)

    def services(self) -> QuerySet:
        return Service.objects.filter(gym_id=self.gym_id)

    def payments(self) -> QuerySet:
        return Payment.objects.filter(gym_id=self.gym_id)

    def attendance(self) -> QuerySet:
        return Attendance.objects.filter(gym_id=self.gym_id)

    def staff(self) -> QuerySet:
        return Staff.objects.filter(gym_id=self.gym_id)

    def expenses(self) -> QuerySet:
        return Expense.objects.filter(gym_id=self.gym_id)

    def enquiries(self) -> QuerySet:
        return Enquiry.objects.filter(gym_id=self.gym_id)

    def status_logs(self) -> QuerySet:
        return MemberStatusLog.objects.filter(gym_id=self.gym_id)

    # ── Writes ───────────────────────────────────────────────────────
    def create(self, model, **fields):
        """Insert a row of `model` owned by this gym."""
        fields.pop("gym", None)
        fields["gym_id"] = self.gym_id
        return model.objects.create(**fields)

    # ── Batched member iteration ─────────────────────────────────────
    def iter_member_pages(self, page_size: int = 200) -> Iterator[List[Member]]:
        """
        Keyset pagination over the gym's members ordered by primary key,
        with plan and payments loaded per page. Memory stays bounded by
        page_size regardless of gym size.
        """
        payments_qs = Payment.objects.order_by("-payment_date", "-created_at", "-pk")
        last_pk = None
        while True:
            qs = (
                self.members()
                .select_related("plan")
                .prefetch_related(Prefetch("payments", queryset=payments_qs))
                .order_by("pk")
            )
            if last_pk is not None:
                qs = qs.filter(pk__gt=last_pk)
            page = list(qs[:page_size])
            if not page:
                return
            yield page
            if len(page) < page_size:
                return
            last_pk = page[-1].pk
