"""
views/payment_views.py
─────────────────────────────────────────────────────────────────────
GET/POST        /api/payments/
GET             /api/payments/summary/
GET             /api/payments/member/<member_pk>/
GET/PUT/DELETE  /api/payments/<pk>/
"""

from __future__ import annotations

import logging

from ..forms.finance_forms import PaymentForm
from ..mixins import ADMIN_ONLY, ADMIN_STAFF, RoleRequiredMixin, TenantScopedMixin
from ..serializers import payment_to_dict
from ..services.payment_service import PaymentService
from .base import ApiView

logger = logging.getLogger(__name__)


class PaymentListView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    method_roles = {"post": ADMIN_STAFF}

    def get(self, request):
        qs = self.scope.payments().select_related("member").order_by("-payment_date", "-created_at")
        if request.GET.get("member_id"):
            qs = qs.filter(member_id=self.query_int("member_id", 0))
        start, end = self.query_date("start_date"), self.query_date("end_date")
        if start:
            qs = qs.filter(payment_date__gte=start)
        if end:
            qs = qs.filter(payment_date__lte=end)
        if request.GET.get("payment_kind"):
            qs = qs.filter(payment_kind=request.GET["payment_kind"])
        return self.paginated(qs, payment_to_dict)

    def post(self, request):
        form = self.validate(PaymentForm, self.json_body(), scope=self.scope)
        data = form.cleaned_data
        payment = PaymentService.record_payment(
            self.scope, data["member_id"],
            amount_paid    = data["amount_paid"],
            total_amount   = data["total_amount"],
            payment_date   = data.get("payment_date"),
            payment_method = data.get("payment_method"),
            payment_kind   = data.get("payment_kind"),
            notes          = data.get("notes") or "",
        )
        return self.ok(payment_to_dict(payment), "Payment recorded successfully", status=201)


class PaymentSummaryView(RoleRequiredMixin, TenantScopedMixin, ApiView):

    def get(self, request):
        summary = PaymentService.summary(
            self.scope, self.query_date("start_date"), self.query_date("end_date"),
        )
        return self.ok(summary.to_dict())


class MemberPaymentsView(RoleRequiredMixin, TenantScopedMixin, ApiView):

    def get(self, request, member_pk):
        member = self.get_object(self.scope.members(), member_pk, "Member")
        qs = self.scope.payments().filter(member=member).order_by("-payment_date", "-created_at")
        return self.ok([payment_to_dict(p, with_member=False) for p in qs])


class PaymentDetailView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    method_roles = {"put": ADMIN_STAFF, "patch": ADMIN_STAFF, "delete": ADMIN_ONLY}

    def _payment(self, pk):
        return self.get_object(self.scope.payments().select_related("member"), pk, "Payment")

    def get(self, request, pk):
        return self.ok(payment_to_dict(self._payment(pk)))

    def put(self, request, pk):
        """Admin correction. due_amount is recomputed on save."""
        payment = self._payment(pk)
        form = self.validate(PaymentForm, self.json_body(), scope=self.scope, partial=True)
        payment = PaymentService.update_payment(self.scope, payment, form.present_data())
        return self.ok(payment_to_dict(payment), "Payment updated successfully")

    patch = put

    def delete(self, request, pk):
        payment = self._payment(pk)
        payment.delete()
        logger.info("[payment] gym=%s deleted payment %s", self.scope.gym_id, pk)
        return self.ok(message="Payment deleted successfully")
