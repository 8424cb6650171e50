"""
services/membership_service.py
─────────────────────────────────────────────────────────────────────
Member lifecycle + membership status reconciliation.

MemberService    — create / update / renew, keeps plan_end_date derived
                   from the plan duration.
MembershipReconciler — brings every member's status and plan_end_date
                   in line with the payment ledger and today's date.
"""

from __future__ import annotations

import datetime
import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from django.conf import settings
from django.db import DatabaseError, models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ..exceptions import TenantSweepError
from ..models import Gym, Member, MemberStatusLog, Payment, Plan
from ..repository import TenantScope
from .dates import add_months, today as local_today
from .payment_service import PLAN_KINDS, PaymentService, latest_payment_for, to_decimal

logger = logging.getLogger(__name__)


class ReconcileReason(models.TextChoices):
    NO_PAYMENT    = 'no_payment',    _('Plan expired with no payment on record')
    UNPAID_DUES   = 'unpaid_dues',   _('Plan expired with unpaid dues')
    PLAN_EXTENDED = 'plan_extended', _('Plan extended after full payment')
    REACTIVATED   = 'reactivated',   _('Dues cleared, membership reactivated')


# ────────────────────────────────────────────────────────────────────
#  Data Transfer Objects
# ────────────────────────────────────────────────────────────────────

@dataclass
class MemberChange:
    """One status / plan_end_date transition decided for a member."""
    id: int
    name: str
    reason: str
    old_status: str
    new_status: str
    old_plan_end_date: Optional[datetime.date]
    new_plan_end_date: Optional[datetime.date] = None

    def to_dict(self) -> dict:
        data = {
            "id":          self.id,
            "name":        self.name,
            "reason":      str(ReconcileReason(self.reason).label),
            "reason_code": str(self.reason),
            "new_status":  self.new_status,
        }
        if self.new_plan_end_date is not None:
            data["new_plan_end_date"] = self.new_plan_end_date.isoformat()
        return data


@dataclass
class ReconcileResult:
    """Outcome of one tenant sweep."""
    gym_id: object
    total_checked: int = 0
    updated_members: List[MemberChange] = field(default_factory=list)
    failed_members: List[Dict] = field(default_factory=list)   # {"id": ..., "error": ...}
    timed_out: bool = False
    dry_run: bool = False

    @property
    def total_updated(self) -> int:
        return len(self.updated_members)

    def to_dict(self) -> dict:
        data = {
            "totalChecked":   self.total_checked,
            "totalUpdated":   self.total_updated,
            "updatedMembers": [c.to_dict() for c in self.updated_members],
        }
        if self.failed_members:
            data["failedMembers"] = self.failed_members
        if self.timed_out:
            data["timedOut"] = True
        if self.dry_run:
            data["dryRun"] = True
        return data


# ────────────────────────────────────────────────────────────────────
#  Transition rules
# ────────────────────────────────────────────────────────────────────

def decide_transition(
    member: Member,
    payments: Iterable[Payment],
    today: datetime.date,
) -> Optional[MemberChange]:
    """
    Decide what, if anything, should change for one member.

    Expired (plan_end_date < today):
        no plan payment            → inactive  (no_payment)
        latest plan payment owes   → inactive  (unpaid_dues)
        latest plan payment settled→ extend by one plan period, active
    Not expired:
        inactive + latest plan payment settled → active (reactivated)

    Only plan_renewal payments count; admission fees and other sales
    are ignored throughout. Returns None when the member is already
    consistent.
    """
    inactive = Member.Status.INACTIVE
    active   = Member.Status.ACTIVE

    if member.plan_end_date is None:
        logger.warning("[reconcile] member %s has no plan_end_date, skipped", member.pk)
        return None

    latest = latest_payment_for(payments, kinds=PLAN_KINDS)

    def change(reason, new_status, new_end=None):
        return MemberChange(
            id=member.pk, name=member.name, reason=reason,
            old_status=member.status, new_status=new_status,
            old_plan_end_date=member.plan_end_date, new_plan_end_date=new_end,
        )

    if member.plan_end_date < today:
        if latest is None:
            if member.status == inactive:
                return None
            return change(ReconcileReason.NO_PAYMENT, inactive)

        if latest.due_amount > 0:
            if member.status == inactive:
                return None
            return change(ReconcileReason.UNPAID_DUES, inactive)

        plan = member.plan
        if plan is None:
            logger.warning(
                "[reconcile] member %s is paid up but has no plan; extension skipped", member.pk
            )
            return None
        new_end = add_months(member.plan_end_date, plan.duration_in_months)
        return change(ReconcileReason.PLAN_EXTENDED, active, new_end)

    if member.status == inactive and latest is not None and latest.due_amount == 0:
        return change(ReconcileReason.REACTIVATED, active)

    return None


# ────────────────────────────────────────────────────────────────────
#  Reconciler
# ────────────────────────────────────────────────────────────────────

class MembershipReconciler:
    """
    Sweeps one gym's members page by page and applies decide_transition.

    Each member is written in its own transaction together with its
    MemberStatusLog row; a failure on one member is logged and the sweep
    moves on. A failure listing the members aborts the whole gym with
    TenantSweepError. When the time budget runs out the remaining members
    are left for the next run and the result is marked timed_out.
    """

    def __init__(
        self,
        scope: TenantScope,
        *,
        today: Optional[datetime.date] = None,
        dry_run: bool = False,
        page_size: Optional[int] = None,
        time_budget: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.scope       = scope
        self.today       = today or local_today()
        self.dry_run     = dry_run
        self.page_size   = page_size or settings.RECONCILE_PAGE_SIZE
        self.time_budget = settings.RECONCILE_TIME_BUDGET_SECONDS if time_budget is None else time_budget
        self.clock       = clock

    def run(self) -> ReconcileResult:
        result   = ReconcileResult(gym_id=self.scope.gym_id, dry_run=self.dry_run)
        deadline = self.clock() + self.time_budget if self.time_budget else None

        logger.info(
            "[reconcile] gym=%s today=%s dry_run=%s started",
            self.scope.gym_id, self.today, self.dry_run,
        )
        try:
            for page in self.scope.iter_member_pages(self.page_size):
                for member in page:
                    if deadline is not None and self.clock() >= deadline:
                        result.timed_out = True
                        logger.warning(
                            "[reconcile] gym=%s time budget exhausted after %d members",
                            self.scope.gym_id, result.total_checked,
                        )
                        return result
                    self._process(member, result)
        except DatabaseError as exc:
            logger.error("[reconcile] gym=%s member listing failed: %s", self.scope.gym_id, exc)
            raise TenantSweepError(self.scope.gym_id, exc) from exc

        logger.info(
            "[reconcile] gym=%s checked:%d updated:%d failed:%d",
            self.scope.gym_id, result.total_checked, result.total_updated,
            len(result.failed_members),
        )
        return result

    def _process(self, member: Member, result: ReconcileResult) -> None:
        result.total_checked += 1
        change = decide_transition(member, member.payments.all(), self.today)
        if change is None:
            return
        if self.dry_run:
            result.updated_members.append(change)
            return
        try:
            self._apply(member, change)
        except DatabaseError as exc:
            logger.error(
                "[reconcile] member %s update failed (%s): %s", member.pk, change.reason, exc
            )
            result.failed_members.append({"id": member.pk, "error": str(exc)})
            return
        result.updated_members.append(change)

    def _apply(self, member: Member, change: MemberChange) -> None:
        fields = {"status": change.new_status, "updated_at": timezone.now()}
        if change.new_plan_end_date is not None:
            fields["plan_end_date"] = change.new_plan_end_date

        with transaction.atomic():
            # queryset update: no model signals, so no duplicate audit row
            self.scope.members().filter(pk=member.pk).update(**fields)
            self.scope.create(
                MemberStatusLog,
                member            = member,
                source            = MemberStatusLog.Source.RECONCILER,
                reason            = change.reason,
                old_status        = change.old_status,
                new_status        = change.new_status,
                old_plan_end_date = change.old_plan_end_date,
                new_plan_end_date = change.new_plan_end_date or change.old_plan_end_date,
            )

        member.status = change.new_status
        if change.new_plan_end_date is not None:
            member.plan_end_date = change.new_plan_end_date


def reconcile_gym(gym_id, **kwargs) -> ReconcileResult:
    """Convenience entry point used by tasks, the command and the API."""
    return MembershipReconciler(TenantScope(gym_id), **kwargs).run()


def reconcile_all_gyms(only_automated: bool = True, **kwargs) -> Dict[str, ReconcileResult]:
    """
    Sweeps gyms one after another, keyed by gym id in the result.
    A gym whose sweep aborts is logged and left out; the rest still run.
    """
    gyms = Gym.objects.order_by("created_at")
    if only_automated:
        gyms = gyms.filter(auto_inactive_members=True)

    results = {}
    for gym_id in gyms.values_list("pk", flat=True):
        try:
            results[str(gym_id)] = reconcile_gym(gym_id, **kwargs)
        except TenantSweepError:
            logger.exception("[reconcile] gym=%s sweep aborted, continuing with the next gym", gym_id)
    return results


# ────────────────────────────────────────────────────────────────────
#  Member Service
# ────────────────────────────────────────────────────────────────────

class MemberService:

    EDITABLE_FIELDS = (
        "name", "phone", "email", "dob", "gender", "status", "plan", "batch", "discount_value",
    )

    @staticmethod
    def plan_end_for(start: datetime.date, plan: Optional[Plan]) -> Optional[datetime.date]:
        if plan is None:
            return None
        return add_months(start, plan.duration_in_months)

    @classmethod
    @transaction.atomic
    def create_member(cls, scope: TenantScope, data: dict) -> Member:
        """
        Create an active member. plan_end_date = join_date + plan duration.
        A positive admission fee is recorded as an admission_fee payment,
        which the reconciler never counts towards the plan.
        """
        join_date = data.get("join_date") or local_today()
        plan      = data["plan"]
        admission = to_decimal(data.get("admission_fees"), "admission_fees")

        member = scope.create(
            Member,
            name           = data["name"],
            phone          = data["phone"],
            email          = data.get("email") or "",
            dob            = data.get("dob"),
            gender         = data.get("gender") or "",
            status         = data.get("status") or Member.Status.ACTIVE,
            plan           = plan,
            batch          = data.get("batch"),
            join_date      = join_date,
            plan_end_date  = cls.plan_end_for(join_date, plan),
            discount_value = to_decimal(data.get("discount_value"), "discount_value"),
            admission_fees = admission,
        )

        if admission > 0:
            PaymentService.record_payment(
                scope, member,
                amount_paid    = admission,
                total_amount   = admission,
                payment_date   = join_date,
                payment_method = data.get("payment_method") or Payment.Method.CASH,
                payment_kind   = Payment.Kind.ADMISSION_FEE,
                notes          = "Admission fee",
            )

        logger.info("[member] gym=%s created member %s (%s)", scope.gym_id, member.pk, member.name)
        return member

    @classmethod
    @transaction.atomic
    def update_member(cls, scope: TenantScope, member: Member, data: dict) -> Member:
        """
        Apply profile edits. Changing the plan does not move
        plan_end_date; that only happens on renewal or reconciliation.
        """
        for name, value in data.items():
            if name in cls.EDITABLE_FIELDS:
                setattr(member, name, value)
        member.save()
        return member

    @classmethod
    @transaction.atomic
    def renew_member(
        cls,
        scope: TenantScope,
        member: Member,
        *,
        plan: Optional[Plan] = None,
        amount_paid,
        total_amount=None,
        payment_date=None,
        payment_method: str = Payment.Method.CASH,
        notes: str = "",
    ) -> Payment:
        """
        Record a plan payment and start the next period from the later
        of today and the current plan_end_date. The member becomes
        active only when the payment is settled.
        """
        plan = plan or member.plan
        if plan is None:
            raise ValueError("Member has no plan to renew")
        total = plan.price - member.discount_value if total_amount is None else total_amount
        if to_decimal(total) < 0:
            total = Decimal("0")

        payment = PaymentService.record_payment(
            scope, member,
            amount_paid    = amount_paid,
            total_amount   = total,
            payment_date   = payment_date,
            payment_method = payment_method,
            payment_kind   = Payment.Kind.PLAN_RENEWAL,
            notes          = notes,
        )

        today = local_today()
        start = max(today, member.plan_end_date) if member.plan_end_date else today
        member.plan          = plan
        member.plan_end_date = add_months(start, plan.duration_in_months)
        if payment.is_settled:
            member.status = Member.Status.ACTIVE
        member._change_reason = "renewal"
        member.save()

        logger.info(
            "[member] gym=%s renewed member %s until %s (due %s)",
            scope.gym_id, member.pk, member.plan_end_date, payment.due_amount,
        )
        return payment
