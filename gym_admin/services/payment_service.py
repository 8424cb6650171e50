"""
services/payment_service.py
─────────────────────────────────────────────────────────────────────
Payment aggregation helpers + payment recording.

The two pure helpers (compute_due_amount, latest_payment_for) are the
ones the status reconciler and the reports rely on; they accept any
iterable of payment-like objects and never touch the database.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import Sum

from ..models import Member, Payment
from ..repository import TenantScope
from .dates import parse_date

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


# ────────────────────────────────────────────────────────────────────
#  Pure helpers
# ────────────────────────────────────────────────────────────────────

def to_decimal(value, field: str = "amount") -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value in (None, ""):
        return ZERO
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{field} must be a number")


def compute_due_amount(total, paid) -> Decimal:
    """max(0, total - paid). Overpayment never produces a negative due."""
    due = to_decimal(total, "total_amount") - to_decimal(paid, "amount_paid")
    return due if due > ZERO else ZERO


# payments that count towards a membership plan
PLAN_KINDS = (Payment.Kind.PLAN_RENEWAL,)


def latest_payment_for(payments: Iterable, exclude_admission_fee: bool = True, kinds=None):
    """
    Payment with the greatest payment_date, or None.

    With kinds given only payments of those kinds are considered;
    otherwise admission-fee payments are dropped first when
    exclude_admission_fee is set. Ties on the same date keep the order
    the payments were given in (stable sort), so callers control
    tie-breaking by input order.
    """
    def counts(p):
        if kinds is not None:
            return p.payment_kind in kinds
        return not (exclude_admission_fee and p.payment_kind == Payment.Kind.ADMISSION_FEE)

    candidates = [p for p in payments if counts(p) and p.payment_date is not None]
    if not candidates:
        return None
    candidates.sort(key=lambda p: p.payment_date, reverse=True)
    return candidates[0]


# ────────────────────────────────────────────────────────────────────
#  Data Transfer Objects
# ────────────────────────────────────────────────────────────────────

@dataclass
class PaymentSummary:
    total_amount: Decimal
    total_paid: Decimal
    total_due: Decimal
    count: int

    def to_dict(self) -> dict:
        return {
            "total_amount": float(self.total_amount),
            "total_paid":   float(self.total_paid),
            "total_due":    float(self.total_due),
            "count":        self.count,
        }


# ────────────────────────────────────────────────────────────────────
#  Payment Service
# ────────────────────────────────────────────────────────────────────

class PaymentService:
    """Recording and summarising payments inside one gym."""

    @classmethod
    @transaction.atomic
    def record_payment(
        cls,
        scope: TenantScope,
        member: Member,
        *,
        amount_paid,
        total_amount,
        payment_date=None,
        payment_method: str = Payment.Method.CASH,
        payment_kind: str = Payment.Kind.PLAN_RENEWAL,
        notes: str = "",
    ) -> Payment:
        """
        Store a payment for a member of this gym. due_amount is derived
        in Payment.save().
        """
        if member.gym_id != scope.gym_id:
            raise PermissionError("Member does not belong to this gym")

        payment = Payment(
            gym_id         = scope.gym_id,
            member         = member,
            amount_paid    = to_decimal(amount_paid, "amount_paid"),
            total_amount   = to_decimal(total_amount, "total_amount"),
            payment_method = payment_method or Payment.Method.CASH,
            payment_kind   = payment_kind or Payment.Kind.PLAN_RENEWAL,
            notes          = notes or "",
        )
        if payment_date:
            payment.payment_date = parse_date(payment_date, "payment_date")
        payment.save()

        logger.info(
            "[payment] gym=%s member=%s kind=%s paid=%s total=%s due=%s",
            scope.gym_id, member.pk, payment.payment_kind,
            payment.amount_paid, payment.total_amount, payment.due_amount,
        )
        return payment

    @classmethod
    @transaction.atomic
    def update_payment(cls, scope: TenantScope, payment: Payment, data: dict) -> Payment:
        """Admin correction. Only keys present in data are changed."""
        if payment.gym_id != scope.gym_id:
            raise PermissionError("Payment does not belong to this gym")

        member = data.get("member_id")
        if member is not None:
            if member.gym_id != scope.gym_id:
                raise PermissionError("Member does not belong to this gym")
            payment.member = member
        for name in ("amount_paid", "total_amount"):
            if data.get(name) is not None:
                setattr(payment, name, to_decimal(data[name], name))
        if data.get("payment_date"):
            payment.payment_date = parse_date(data["payment_date"], "payment_date")
        if data.get("notes") is not None:
            payment.notes = data["notes"]
        for name in ("payment_method", "payment_kind"):
            if data.get(name):
                setattr(payment, name, data[name])
        payment.save()

        logger.info("[payment] gym=%s corrected payment %s due=%s",
                    scope.gym_id, payment.pk, payment.due_amount)
        return payment

    @classmethod
    def summary(cls, scope: TenantScope, start_date=None, end_date=None) -> PaymentSummary:
        qs = scope.payments()
        if start_date:
            qs = qs.filter(payment_date__gte=start_date)
        if end_date:
            qs = qs.filter(payment_date__lte=end_date)
        agg = qs.aggregate(
            total_amount=Sum("total_amount"),
            total_paid=Sum("amount_paid"),
            total_due=Sum("due_amount"),
        )
        return PaymentSummary(
            total_amount = agg["total_amount"] or ZERO,
            total_paid   = agg["total_paid"] or ZERO,
            total_due    = agg["total_due"] or ZERO,
            count        = qs.count(),
        )
