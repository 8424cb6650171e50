"""
views/enquiry_views.py
─────────────────────────────────────────────────────────────────────
GET/POST        /api/enquiries/          (status, search)
GET/PUT/DELETE  /api/enquiries/<pk>/
PATCH           /api/enquiries/<pk>/status/
"""

from __future__ import annotations

from ..forms.catalogue_forms import EnquiryForm, EnquiryStatusForm
from ..mixins import ADMIN_STAFF, RoleRequiredMixin, TenantScopedMixin
from ..serializers import enquiry_to_dict
from .base import ApiView
from .crud import ScopedDetailView, ScopedListCreateView


class EnquiryListView(ScopedListCreateView):
    scope_accessor = "enquiries"
    form_class     = EnquiryForm
    serializer     = staticmethod(enquiry_to_dict)
    label          = "Enquiry"
    ordering       = ("-created_at",)
    search_fields  = ("name", "phone", "email")

    def filter_queryset(self, qs):
        qs = super().filter_queryset(qs)
        status = self.request.GET.get("status")
        if status:
            qs = qs.filter(status=status)
        return qs


class EnquiryDetailView(ScopedDetailView):
    scope_accessor = "enquiries"
    form_class     = EnquiryForm
    serializer     = staticmethod(enquiry_to_dict)
    label          = "Enquiry"


class EnquiryStatusView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    allowed_roles = ADMIN_STAFF

    def patch(self, request, pk):
        enquiry = self.get_object(self.scope.enquiries(), pk, "Enquiry")
        form = self.validate(EnquiryStatusForm, self.json_body())
        enquiry.status = form.cleaned_data["status"]
        enquiry.save(update_fields=["status"])
        return self.ok(enquiry_to_dict(enquiry), "Enquiry status updated successfully")
