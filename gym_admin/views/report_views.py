"""
views/report_views.py
─────────────────────────────────────────────────────────────────────
GET /api/reports/expiring-memberships/   ?days=15     admin, staff
GET /api/reports/birthdays/              ?days=30     all roles
GET /api/reports/payment-status/                      admin, staff
GET /api/reports/attendance-summary/     ?start_date&end_date   all roles
GET /api/reports/financial-summary/      ?start_date&end_date   admin
"""

from __future__ import annotations

from ..mixins import ADMIN_ONLY, ADMIN_STAFF, ALL_ROLES, RoleRequiredMixin, TenantScopedMixin
from ..services.report_service import ReportService
from .base import ApiView


# look-ahead windows wider than a year are clamped
MAX_DAYS = 366


class _ReportView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    """Read-only, tenant-scoped report endpoint."""


class ExpiringMembershipsView(_ReportView):
    allowed_roles = ADMIN_STAFF

    def get(self, request):
        days = self.query_int("days", 15, maximum=MAX_DAYS)
        return self.ok(ReportService.expiring_memberships(self.scope, days=days))


class UpcomingBirthdaysView(_ReportView):
    allowed_roles = ALL_ROLES

    def get(self, request):
        days = self.query_int("days", 30, maximum=MAX_DAYS)
        return self.ok(ReportService.upcoming_birthdays(self.scope, days=days))


class PaymentStatusView(_ReportView):
    allowed_roles = ADMIN_STAFF

    def get(self, request):
        return self.ok(ReportService.payment_status(self.scope))


class AttendanceSummaryView(_ReportView):
    allowed_roles = ALL_ROLES

    def get(self, request):
        start, end = self.date_window()
        return self.ok(ReportService.attendance_summary(self.scope, start, end))


class FinancialSummaryView(_ReportView):
    allowed_roles = ADMIN_ONLY

    def get(self, request):
        start, end = self.date_window()
        return self.ok(ReportService.financial_summary(self.scope, start, end))
