"""
views/crud.py
─────────────────────────────────────────────────────────────────────
Generic tenant-scoped list/create and detail/update/delete views for
the simple catalogue resources. Subclasses name the TenantScope
accessor, the ModelForm and the serializer.
"""

from __future__ import annotations

from django.db.models import Q

from ..forms.base import merged_with_instance
from ..mixins import ADMIN_ONLY, ADMIN_STAFF, RoleRequiredMixin, TenantScopedMixin
from .base import ApiView


class ScopedListCreateView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    scope_accessor: str = ""
    form_class = None
    serializer = None
    label = "Resource"
    ordering = ("name",)
    search_fields: tuple = ()
    method_roles = {"post": ADMIN_STAFF}

    def get_queryset(self):
        return getattr(self.scope, self.scope_accessor)().order_by(*self.ordering)

    def filter_queryset(self, qs):
        search = self.request.GET.get("search", "").strip()
        if search and self.search_fields:
            cond = Q()
            for name in self.search_fields:
                cond |= Q(**{f"{name}__icontains": search})
            qs = qs.filter(cond)
        return qs

    def get(self, request):
        return self.paginated(self.filter_queryset(self.get_queryset()), self.serializer)

    def post(self, request):
        form = self.validate(self.form_class, self.json_body())
        obj = form.save(commit=False)
        obj.gym_id = self.scope.gym_id
        obj.save()
        return self.ok(self.serializer(obj), f"{self.label} created successfully", status=201)


class ScopedDetailView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    scope_accessor: str = ""
    form_class = None
    serializer = None
    label = "Resource"
    method_roles = {"put": ADMIN_STAFF, "patch": ADMIN_STAFF, "delete": ADMIN_ONLY}

    def get_instance(self, pk):
        return self.get_object(getattr(self.scope, self.scope_accessor)(), pk, self.label)

    def get(self, request, pk):
        return self.ok(self.serializer(self.get_instance(pk)))

    def put(self, request, pk):
        obj  = self.get_instance(pk)
        data = merged_with_instance(obj, self.json_body(), self.form_class._meta.fields)
        form = self.validate(self.form_class, data, instance=obj)
        obj  = form.save()
        return self.ok(self.serializer(obj), f"{self.label} updated successfully")

    def before_delete(self, obj):
        """Hook: raise to refuse the delete."""

    def delete(self, request, pk):
        obj = self.get_instance(pk)
        self.before_delete(obj)
        obj.delete()
        return self.ok(message=f"{self.label} deleted successfully")
