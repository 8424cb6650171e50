"""
views/catalogue_views.py
─────────────────────────────────────────────────────────────────────
Plans, batches and add-on services.

GET/POST        /api/plans/           GET/PUT/DELETE /api/plans/<pk>/
GET/POST        /api/batches/         GET/PUT/DELETE /api/batches/<pk>/
GET             /api/batches/<pk>/members/
GET/POST        /api/services/        GET/PUT/DELETE /api/services/<pk>/
"""

from __future__ import annotations

from ..exceptions import ValidationFailed
from ..forms.catalogue_forms import BatchForm, PlanForm, ServiceForm
from ..mixins import RoleRequiredMixin, TenantScopedMixin
from ..models import Member
from ..serializers import batch_to_dict, member_to_dict, plan_to_dict, service_to_dict
from .base import ApiView
from .crud import ScopedDetailView, ScopedListCreateView


# ────────────────────────────────────────────────────────────────────
#  Plans
# ────────────────────────────────────────────────────────────────────

class PlanListView(ScopedListCreateView):
    scope_accessor = "plans"
    form_class     = PlanForm
    serializer     = staticmethod(plan_to_dict)
    label          = "Plan"
    search_fields  = ("name",)


class PlanDetailView(ScopedDetailView):
    scope_accessor = "plans"
    form_class     = PlanForm
    serializer     = staticmethod(plan_to_dict)
    label          = "Plan"

    def before_delete(self, plan):
        if plan.members.exists():
            raise ValidationFailed("Cannot delete plan as it is assigned to members")


# ────────────────────────────────────────────────────────────────────
#  Batches
# ────────────────────────────────────────────────────────────────────

class BatchListView(ScopedListCreateView):
    scope_accessor = "batches"
    form_class     = BatchForm
    serializer     = staticmethod(batch_to_dict)
    label          = "Batch"
    search_fields  = ("name",)


class BatchDetailView(ScopedDetailView):
    scope_accessor = "batches"
    form_class     = BatchForm
    serializer     = staticmethod(batch_to_dict)
    label          = "Batch"

    def before_delete(self, batch):
        if batch.members.exists():
            raise ValidationFailed("Cannot delete batch as it is assigned to members")


class BatchMembersView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    """Active members assigned to one batch (attendance sheet source)."""

    def get(self, request, pk):
        batch = self.get_object(self.scope.batches(), pk, "Batch")
        members = (
            self.scope.members()
            .filter(batch=batch, status=Member.Status.ACTIVE)
            .select_related("plan", "batch")
            .order_by("name")
        )
        return self.ok([member_to_dict(m) for m in members])


# ────────────────────────────────────────────────────────────────────
#  Services
# ────────────────────────────────────────────────────────────────────

class ServiceListView(ScopedListCreateView):
    scope_accessor = "services"
    form_class     = ServiceForm
    serializer     = staticmethod(service_to_dict)
    label          = "Service"
    search_fields  = ("name",)


class ServiceDetailView(ScopedDetailView):
    scope_accessor = "services"
    form_class     = ServiceForm
    serializer     = staticmethod(service_to_dict)
    label          = "Service"
