"""
services/staff_service.py
─────────────────────────────────────────────────────────────────────
Staff roster management. Creating a staff entry also provisions a
login: an existing profile of the same gym is linked, otherwise a
provider account is created with a temporary password.
"""

from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import dataclass
from typing import Optional

from django.db import DatabaseError, transaction

from ..exceptions import IdentityProviderError
from ..models import CustomUser, Staff, default_staff_permissions
from ..repository import TenantScope
from .identity_service import IdentityClient

logger = logging.getLogger(__name__)

PERMISSION_KEYS = tuple(default_staff_permissions())


def clean_permissions(value) -> dict:
    """
    Accepts a dict of add/edit/delete booleans; missing keys fall back to
    False and unknown keys are rejected.
    """
    if not isinstance(value, dict):
        raise ValueError("permissions must be an object")
    unknown = set(value) - set(PERMISSION_KEYS)
    if unknown:
        raise ValueError(f"unknown permissions: {', '.join(sorted(unknown))}")
    cleaned = default_staff_permissions()
    for key, flag in value.items():
        if not isinstance(flag, bool):
            raise ValueError(f"permission '{key}' must be true or false")
        cleaned[key] = flag
    return cleaned


@dataclass
class StaffCreation:
    staff: Staff
    temporary_password: Optional[str] = None


class StaffService:

    @classmethod
    def create_staff(cls, scope: TenantScope, data: dict,
                     client: IdentityClient = None) -> StaffCreation:
        email = data["email"].strip().lower()
        if scope.staff().filter(email__iexact=email).exists():
            raise ValueError("A staff member with this email already exists")

        temp_password = None
        user = CustomUser.objects.filter(email__iexact=email).first()
        if user is not None and user.gym_id != scope.gym_id:
            raise ValueError("This email belongs to an account of another gym")

        if user is None:
            client = client or IdentityClient()
            temp_password = secrets.token_urlsafe(12)
            identity = client.admin_create_user(email, temp_password)
            try:
                user = CustomUser.objects.create_user(
                    email=email, id=uuid.UUID(identity.id), name=data["name"],
                    phone=data.get("phone") or "", role=data["role"], gym_id=scope.gym_id,
                )
            except (DatabaseError, ValueError):
                logger.exception("[staff] profile creation failed for %s, rolling back", email)
                try:
                    client.admin_delete_user(identity.id)
                except IdentityProviderError as exc:
                    logger.error("[staff] rollback of provider user %s failed: %s", identity.id, exc)
                raise

        staff = scope.create(
            Staff,
            user        = user,
            name        = data["name"],
            email       = email,
            phone       = data.get("phone") or "",
            role        = data["role"],
            permissions = clean_permissions(data.get("permissions") or {}),
        )
        logger.info("[staff] gym=%s added %s as %s", scope.gym_id, email, staff.role)
        return StaffCreation(staff=staff, temporary_password=temp_password)

    @classmethod
    @transaction.atomic
    def update_staff(cls, scope: TenantScope, staff: Staff, data: dict) -> Staff:
        for name in ("name", "phone", "role"):
            if name in data and data[name] is not None:
                setattr(staff, name, data[name])
        if data.get("permissions") is not None:
            staff.permissions = clean_permissions(data["permissions"])
        staff.save()

        # keep the login profile in step with the roster entry
        if staff.user_id:
            CustomUser.objects.filter(pk=staff.user_id, gym_id=scope.gym_id).update(
                name=staff.name, phone=staff.phone, role=staff.role,
            )
        return staff

    @classmethod
    def update_permissions(cls, staff: Staff, permissions) -> Staff:
        staff.permissions = clean_permissions(permissions)
        staff.save(update_fields=["permissions"])
        return staff

    @classmethod
    def delete_staff(cls, scope: TenantScope, staff: Staff, delete_user: bool = False,
                     client: IdentityClient = None) -> None:
        user = staff.user
        staff.delete()
        if delete_user and user is not None and user.gym_id == scope.gym_id:
            (client or IdentityClient()).admin_delete_user(str(user.pk))
            user.delete()
            logger.info("[staff] gym=%s removed account %s", scope.gym_id, user.email)
