"""
views/staff_views.py
─────────────────────────────────────────────────────────────────────
Staff roster — admin only.

GET/POST        /api/staff/                 (role, search)
GET/PUT/DELETE  /api/staff/<pk>/            DELETE body: {"deleteUser": true}
PATCH           /api/staff/<pk>/permissions/
"""

from __future__ import annotations

from django.db.models import Q

from ..exceptions import ValidationFailed
from ..forms.staff_forms import StaffForm
from ..mixins import ADMIN_ONLY, RoleRequiredMixin, TenantScopedMixin
from ..serializers import staff_to_dict
from ..services.staff_service import StaffService
from .base import ApiView


class StaffListView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    allowed_roles = ADMIN_ONLY

    def get(self, request):
        qs = self.scope.staff().order_by("name")
        role = request.GET.get("role")
        if role:
            qs = qs.filter(role=role.lower())
        search = request.GET.get("search", "").strip()
        if search:
            qs = qs.filter(
                Q(name__icontains=search) | Q(email__icontains=search) | Q(phone__icontains=search)
            )
        return self.paginated(qs, staff_to_dict)

    def post(self, request):
        body = self.json_body()
        form = self.validate(StaffForm, body)
        data = dict(form.cleaned_data, permissions=body.get("permissions"))
        created = StaffService.create_staff(self.scope, data)

        payload = staff_to_dict(created.staff)
        if created.temporary_password:
            payload["temporary_password"] = created.temporary_password
        return self.ok(payload, "Staff created successfully", status=201)


class StaffDetailView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    allowed_roles = ADMIN_ONLY

    def _staff(self, pk):
        return self.get_object(self.scope.staff(), pk, "Staff")

    def get(self, request, pk):
        return self.ok(staff_to_dict(self._staff(pk)))

    def put(self, request, pk):
        staff = self._staff(pk)
        body  = self.json_body()
        body.pop("email", None)   # the login email is fixed once provisioned
        form  = self.validate(StaffForm, body, partial=True)
        data  = form.present_data()
        if "permissions" in body:
            data["permissions"] = body["permissions"]
        staff = StaffService.update_staff(self.scope, staff, data)
        return self.ok(staff_to_dict(staff), "Staff updated successfully")

    def delete(self, request, pk):
        staff = self._staff(pk)
        delete_user = bool(self.json_body().get("deleteUser", False))
        StaffService.delete_staff(self.scope, staff, delete_user=delete_user)
        return self.ok(message="Staff deleted successfully")


class StaffPermissionsView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    allowed_roles = ADMIN_ONLY

    def patch(self, request, pk):
        staff = self.get_object(self.scope.staff(), pk, "Staff")
        permissions = self.json_body().get("permissions")
        if permissions is None:
            raise ValidationFailed("Permissions are required")
        staff = StaffService.update_permissions(staff, permissions)
        return self.ok(staff_to_dict(staff), "Staff permissions updated successfully")
