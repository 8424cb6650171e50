"""
services/report_service.py
─────────────────────────────────────────────────────────────────────
Read-only reporting projections over one gym.
Every ratio is guarded: an empty denominator yields 0, never an error.
"""

from __future__ import annotations

import datetime
import logging
from collections import OrderedDict, defaultdict
from decimal import Decimal
from typing import Dict, List, Optional

from django.db.models import Count, Q, Sum

from ..models import Attendance, Member, Payment
from ..repository import TenantScope
from .dates import age_on, next_birthday, today as local_today
from .payment_service import PLAN_KINDS, latest_payment_for

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

CRITICAL_DAYS = 3
WARNING_DAYS  = 7


def _pct(part, whole) -> float:
    if not whole:
        return 0.0
    return round(float(part) / float(whole) * 100, 2)


class ReportService:

    # ── 1. Expiring memberships ──────────────────────────────────────

    @classmethod
    def expiring_memberships(
        cls, scope: TenantScope, days: int = 15, today: Optional[datetime.date] = None
    ) -> dict:
        """
        Active members whose plan ends within `days` days (inclusive),
        bucketed: critical ≤3, warning 4–7, upcoming >7.
        """
        today  = today or local_today()
        cutoff = today + datetime.timedelta(days=days)
        members = (
            scope.members()
            .filter(status=Member.Status.ACTIVE, plan_end_date__gte=today, plan_end_date__lte=cutoff)
            .select_related("plan", "batch")
            .order_by("plan_end_date", "name")
        )

        ranges: Dict[str, List[dict]] = {"critical": [], "warning": [], "upcoming": []}
        for m in members:
            remaining = (m.plan_end_date - today).days
            row = {
                "member_id":      m.pk,
                "name":           m.name,
                "phone":          m.phone,
                "email":          m.email,
                "plan_name":      m.plan.name if m.plan else None,
                "batch_name":     m.batch.name if m.batch else None,
                "plan_end_date":  m.plan_end_date.isoformat(),
                "days_remaining": remaining,
            }
            if remaining <= CRITICAL_DAYS:
                ranges["critical"].append(row)
            elif remaining <= WARNING_DAYS:
                ranges["warning"].append(row)
            else:
                ranges["upcoming"].append(row)

        return {
            "ranges": ranges,
            "summary": {
                "total":    sum(len(v) for v in ranges.values()),
                "critical": len(ranges["critical"]),
                "warning":  len(ranges["warning"]),
                "upcoming": len(ranges["upcoming"]),
            },
        }

    # ── 2. Upcoming birthdays ────────────────────────────────────────

    @classmethod
    def upcoming_birthdays(
        cls, scope: TenantScope, days: int = 30, today: Optional[datetime.date] = None
    ) -> List[dict]:
        today = today or local_today()
        rows = []
        members = scope.members().filter(status=Member.Status.ACTIVE, dob__isnull=False)
        for m in members.only("id", "name", "phone", "email", "dob"):
            upcoming = next_birthday(m.dob, today)
            days_until = (upcoming - today).days
            if days_until > days:
                continue
            rows.append({
                "member_id":     m.pk,
                "name":          m.name,
                "phone":         m.phone,
                "email":         m.email,
                "dob":           m.dob.isoformat(),
                "birthday":      upcoming.isoformat(),
                "days_until":    days_until,
                "turning_age":   age_on(m.dob, upcoming),
            })
        rows.sort(key=lambda r: (r["days_until"], r["name"]))
        return rows

    # ── 3. Payment status ────────────────────────────────────────────

    @classmethod
    def payment_status(cls, scope: TenantScope) -> dict:
        """
        Latest plan payment per active member → paid / partial / no_payment.
        """
        members = (
            scope.members()
            .filter(status=Member.Status.ACTIVE)
            .select_related("plan")
            .prefetch_related("payments")
            .order_by("name")
        )
        report = []
        for m in members:
            payments = sorted(m.payments.all(), key=lambda p: (p.created_at, p.pk), reverse=True)
            last = latest_payment_for(payments, kinds=PLAN_KINDS)
            if last is None:
                status = "no_payment"
            elif last.due_amount > 0:
                status = "partial"
            else:
                status = "paid"
            report.append({
                "member_id":         m.pk,
                "member_name":       m.name,
                "plan_name":         m.plan.name if m.plan else "No Plan",
                "plan_price":        float(m.plan.price) if m.plan else 0.0,
                "plan_end_date":     m.plan_end_date.isoformat() if m.plan_end_date else None,
                "last_payment_date": last.payment_date.isoformat() if last else None,
                "due_amount":        float(last.due_amount) if last else 0.0,
                "payment_status":    status,
            })

        summary = {
            "total_members":   len(report),
            "fully_paid":      sum(1 for r in report if r["payment_status"] == "paid"),
            "partial_payment": sum(1 for r in report if r["payment_status"] == "partial"),
            "no_payment":      sum(1 for r in report if r["payment_status"] == "no_payment"),
            "total_dues":      round(sum(r["due_amount"] for r in report), 2),
        }
        return {"summary": summary, "members": report}

    # ── 4. Attendance summary ────────────────────────────────────────

    @classmethod
    def attendance_summary(
        cls, scope: TenantScope, start_date: datetime.date, end_date: datetime.date
    ) -> dict:
        members = list(
            scope.members()
            .filter(status=Member.Status.ACTIVE)
            .order_by("name")
            .values("id", "name", "batch_id")
        )
        counts = {
            row["member_id"]: row
            for row in (
                scope.attendance()
                .filter(date__gte=start_date, date__lte=end_date,
                        member_id__in=[m["id"] for m in members])
                .values("member_id")
                .annotate(
                    present=Count("id", filter=Q(status=Attendance.Status.PRESENT)),
                    absent=Count("id", filter=Q(status=Attendance.Status.ABSENT)),
                    total=Count("id"),
                )
            )
        }

        report = []
        present_all = total_all = 0
        for m in members:
            c = counts.get(m["id"], {"present": 0, "absent": 0, "total": 0})
            present_all += c["present"]
            total_all   += c["total"]
            report.append({
                "member_id":             m["id"],
                "member_name":           m["name"],
                "batch_id":              m["batch_id"],
                "present_count":         c["present"],
                "absent_count":          c["absent"],
                "total_records":         c["total"],
                "attendance_percentage": _pct(c["present"], c["total"]),
            })

        summary = {
            "date_range": {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            "total_members": len(members),
            "overall_attendance_percentage": _pct(present_all, total_all),
            "members_with_perfect_attendance": sum(
                1 for r in report if r["total_records"] > 0 and r["attendance_percentage"] == 100
            ),
            "members_with_poor_attendance": sum(
                1 for r in report if r["total_records"] > 0 and r["attendance_percentage"] < 50
            ),
            "members_without_records": sum(1 for r in report if r["total_records"] == 0),
        }
        return {"summary": summary, "members": report}

    # ── 5. Financial summary ─────────────────────────────────────────

    @classmethod
    def financial_summary(
        cls, scope: TenantScope, start_date: datetime.date, end_date: datetime.date
    ) -> dict:
        payments = scope.payments().filter(payment_date__gte=start_date, payment_date__lte=end_date)
        expenses = scope.expenses().filter(date__gte=start_date, date__lte=end_date)

        totals = payments.aggregate(
            received=Sum("amount_paid"), billed=Sum("total_amount"), due=Sum("due_amount"),
        )
        received = totals["received"] or ZERO
        billed   = totals["billed"] or ZERO
        due      = totals["due"] or ZERO

        by_method = [
            {"method": row["payment_method"] or Payment.Method.CASH, "amount": float(row["amount"] or 0)}
            for row in payments.values("payment_method")
                               .annotate(amount=Sum("amount_paid"))
                               .order_by("payment_method")
        ]

        daily: "OrderedDict[str, float]" = OrderedDict()
        for row in payments.values("payment_date").annotate(amount=Sum("amount_paid")).order_by("payment_date"):
            daily[row["payment_date"].isoformat()] = float(row["amount"] or 0)

        categories: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        for row in expenses.values("category").annotate(amount=Sum("amount")):
            categories[row["category"] or "Uncategorized"] += row["amount"] or ZERO
        expense_total = sum(categories.values(), ZERO)

        return {
            "period": {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            "revenue": {
                "total_received":  float(received),
                "total_billed":    float(billed),
                "total_due":       float(due),
                "payment_methods": by_method,
                "daily":           [{"date": d, "amount": a} for d, a in daily.items()],
            },
            "expenses": {
                "total":      float(expense_total),
                "categories": [
                    {"category": name, "amount": float(amount)}
                    for name, amount in sorted(categories.items())
                ],
            },
            "summary": {
                "net_profit":      float(received - expense_total),
                "collection_rate": _pct(received, billed),
            },
        }

    # ── 6. Expense summary ───────────────────────────────────────────

    @classmethod
    def expense_summary(
        cls, scope: TenantScope, start_date: datetime.date, end_date: datetime.date
    ) -> dict:
        """Expense total for the window, broken down per day and per category."""
        expenses = scope.expenses().filter(date__gte=start_date, date__lte=end_date)

        by_date = [
            {"date": row["date"].isoformat(), "amount": float(row["amount"] or 0)}
            for row in expenses.values("date").annotate(amount=Sum("amount")).order_by("date")
        ]
        categories: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        for row in expenses.values("category").annotate(amount=Sum("amount")):
            categories[row["category"] or "Uncategorized"] += row["amount"] or ZERO

        return {
            "period":        {"startDate": start_date.isoformat(), "endDate": end_date.isoformat()},
            "totalExpenses": float(sum(categories.values(), ZERO)),
            "expensesByDate": by_date,
            "expensesByCategory": [
                {"category": name, "amount": float(amount)}
                for name, amount in sorted(categories.items())
            ],
        }
