"""
views/member_views.py
─────────────────────────────────────────────────────────────────────
Members + the on-demand membership status check.

GET/POST        /api/members/
GET/PUT/DELETE  /api/members/<pk>/
POST            /api/members/<pk>/renew/
GET             /api/members/<pk>/status-history/
POST            /api/members/check-status/
"""

from __future__ import annotations

import logging

from django.db.models import Q

from ..forms.member_forms import MemberForm, RenewMemberForm
from ..mixins import ADMIN_ONLY, ADMIN_STAFF, RoleRequiredMixin, TenantScopedMixin
from ..serializers import member_to_dict, payment_to_dict
from ..services.membership_service import MemberService, MembershipReconciler
from .base import ApiView

logger = logging.getLogger(__name__)


class MemberListView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    method_roles = {"post": ADMIN_STAFF}

    def get(self, request):
        qs = self.scope.members().select_related("plan", "batch").order_by("-created_at")

        status = request.GET.get("status")
        if status:
            qs = qs.filter(status=status)
        batch_id = request.GET.get("batch_id")
        if batch_id:
            qs = qs.filter(batch_id=self.query_int("batch_id", 0))
        search = request.GET.get("search", "").strip()
        if search:
            qs = qs.filter(
                Q(name__icontains=search) | Q(email__icontains=search) | Q(phone__icontains=search)
            )
        return self.paginated(qs, member_to_dict)

    def post(self, request):
        form   = self.validate(MemberForm, self.json_body(), scope=self.scope)
        member = MemberService.create_member(self.scope, form.service_data())
        return self.ok(member_to_dict(member), "Member created successfully", status=201)


class MemberDetailView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    method_roles = {"put": ADMIN_STAFF, "patch": ADMIN_STAFF, "delete": ADMIN_ONLY}

    def _member(self, pk):
        return self.get_object(self.scope.members().select_related("plan", "batch"), pk, "Member")

    def get(self, request, pk):
        return self.ok(member_to_dict(self._member(pk)))

    def put(self, request, pk):
        member = self._member(pk)
        form   = self.validate(MemberForm, self.json_body(), scope=self.scope, partial=True)
        member = MemberService.update_member(self.scope, member, form.service_data())
        return self.ok(member_to_dict(member), "Member updated successfully")

    patch = put

    def delete(self, request, pk):
        member = self._member(pk)
        member.delete()
        logger.info("[member] gym=%s deleted member %s", self.scope.gym_id, pk)
        return self.ok(message="Member deleted successfully")


class MemberRenewView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    allowed_roles = ADMIN_STAFF

    def post(self, request, pk):
        member = self.get_object(self.scope.members().select_related("plan"), pk, "Member")
        form   = self.validate(RenewMemberForm, self.json_body(), scope=self.scope)
        data   = form.cleaned_data
        payment = MemberService.renew_member(
            self.scope, member,
            plan           = data.get("plan_id"),
            amount_paid    = data["amount_paid"],
            total_amount   = data.get("total_amount"),
            payment_date   = data.get("payment_date"),
            payment_method = data.get("payment_method") or "cash",
            notes          = data.get("notes") or "",
        )
        return self.ok(
            {"member": member_to_dict(member), "payment": payment_to_dict(payment, with_member=False)},
            "Membership renewed successfully",
            status=201,
        )


class MemberStatusHistoryView(RoleRequiredMixin, TenantScopedMixin, ApiView):

    def get(self, request, pk):
        member = self.get_object(self.scope.members(), pk, "Member")
        logs = self.scope.status_logs().filter(member=member).order_by("-created_at", "-pk")
        return self.paginated(logs, lambda log: {
            "source":            log.source,
            "reason":            log.reason,
            "old_status":        log.old_status,
            "new_status":        log.new_status,
            "old_plan_end_date": log.old_plan_end_date.isoformat() if log.old_plan_end_date else None,
            "new_plan_end_date": log.new_plan_end_date.isoformat() if log.new_plan_end_date else None,
            "created_at":        log.created_at.isoformat(),
        })


class MemberStatusCheckView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    """
    Runs the status reconciler for the caller's gym right away,
    regardless of the gym's automatic-check switch.
    body (optional): {"dry_run": true}
    """
    allowed_roles = ADMIN_STAFF

    def post(self, request):
        body    = self.json_body()
        dry_run = bool(body.get("dry_run", False))
        result  = MembershipReconciler(self.scope, dry_run=dry_run).run()
        logger.info(
            "[reconcile] manual check by %s: gym=%s updated=%d",
            request.user.email, self.scope.gym_id, result.total_updated,
        )
        return self.ok(result.to_dict(), "Member status check completed")
