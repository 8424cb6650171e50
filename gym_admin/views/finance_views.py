"""
views/finance_views.py
─────────────────────────────────────────────────────────────────────
Expenses (admin + staff; delete admin only).

GET/POST        /api/expenses/     (start_date, end_date, search, category)
GET             /api/expenses/summary/   (start_date, end_date required)
GET/PUT/DELETE  /api/expenses/<pk>/
"""

from __future__ import annotations

from ..forms.catalogue_forms import ExpenseForm
from ..mixins import ADMIN_ONLY, ADMIN_STAFF, RoleRequiredMixin, TenantScopedMixin
from ..serializers import expense_to_dict
from ..services.report_service import ReportService
from .base import ApiView
from .crud import ScopedDetailView, ScopedListCreateView


class ExpenseListView(ScopedListCreateView):
    scope_accessor = "expenses"
    form_class     = ExpenseForm
    serializer     = staticmethod(expense_to_dict)
    label          = "Expense"
    ordering       = ("-date", "-created_at")
    search_fields  = ("title",)
    allowed_roles  = ADMIN_STAFF
    method_roles   = {}

    def filter_queryset(self, qs):
        qs = super().filter_queryset(qs)
        start, end = self.query_date("start_date"), self.query_date("end_date")
        if start:
            qs = qs.filter(date__gte=start)
        if end:
            qs = qs.filter(date__lte=end)
        category = self.request.GET.get("category")
        if category:
            qs = qs.filter(category__iexact=category)
        return qs


class ExpenseDetailView(ScopedDetailView):
    scope_accessor = "expenses"
    form_class     = ExpenseForm
    serializer     = staticmethod(expense_to_dict)
    label          = "Expense"
    allowed_roles  = ADMIN_STAFF
    method_roles   = {"delete": ADMIN_ONLY}


class ExpenseSummaryView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    allowed_roles = ADMIN_STAFF

    def get(self, request):
        start, end = self.date_window()
        return self.ok(ReportService.expense_summary(self.scope, start, end))
