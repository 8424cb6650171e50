"""
mixins.py
─────────────────────────────────────────────────────────────────────
Role-based access (RBAC) and tenant scoping for the API views.

Each mixin extends check_access(); ApiView calls it inside its error
handling, so a refusal becomes a JSON 401/403 instead of a redirect.

    class MemberDetailView(RoleRequiredMixin, TenantScopedMixin, ApiView):
        method_roles = {"put": [Role.ADMIN, Role.STAFF], "delete": [Role.ADMIN]}
"""

from django.core.exceptions import PermissionDenied

from .exceptions import Forbidden
from .models import Role
from .repository import TenantScope

ALL_ROLES   = [Role.ADMIN, Role.STAFF, Role.TRAINER]
ADMIN_STAFF = [Role.ADMIN, Role.STAFF]
ADMIN_ONLY  = [Role.ADMIN]


class RoleRequiredMixin:
    """
    The user's role must be in allowed_roles, or in method_roles[<method>]
    when the HTTP method has its own entry. Empty means any signed-in user.
    """
    allowed_roles: list = []
    method_roles: dict = {}

    def check_access(self, request):
        super().check_access(request)

        if request.user.is_superuser:
            return

        roles = self.method_roles.get(request.method.lower(), self.allowed_roles)
        if not roles:
            return

        if not request.user.has_role(*roles):
            raise PermissionDenied(
                "Access denied. You do not have permission to perform this action."
            )


class TenantScopedMixin:
    """Attaches self.scope (TenantScope of the user's gym)."""

    def check_access(self, request):
        super().check_access(request)
        if not getattr(request.user, "gym_id", None):
            raise Forbidden("Your account is not attached to a gym")
        self.scope = TenantScope.for_user(request.user)
