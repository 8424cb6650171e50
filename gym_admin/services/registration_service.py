"""
services/registration_service.py
─────────────────────────────────────────────────────────────────────
Two-step gym registration with an emailed one-time code.

  1. initiate()  — store the pending sign-up under the email in the
                   cache with a TTL (OTP_TTL_SECONDS) and email the code
  2. verify()    — check the code, create the provider account, then
                   the Gym (id = provider user id) and its admin profile

Pending entries live only in the cache; an expired entry is simply gone.
The password is kept Fernet-encrypted under a key derived from
SECRET_KEY and the code, so it is only readable once the right code
is presented.
"""

from __future__ import annotations

import base64
import logging
import secrets
import smtplib
import time
import uuid
from dataclasses import dataclass

from cryptography.fernet import Fernet
from django.conf import settings
from django.core.cache import cache
from django.core.mail import send_mail
from django.db import DatabaseError, transaction
from django.utils.crypto import constant_time_compare, salted_hmac

from ..exceptions import IdentityProviderError, OtpDeliveryError
from ..models import CustomUser, Gym, Role
from .identity_service import IdentityClient

logger = logging.getLogger(__name__)

MAX_OTP_ATTEMPTS = 5


def generate_otp() -> str:
    return f"{secrets.randbelow(10 ** 6):06d}"


def _otp_digest(email: str, otp: str) -> str:
    return salted_hmac("gym_admin.registration", f"{email}:{otp}").hexdigest()


def _password_box(email: str, otp: str) -> Fernet:
    raw = salted_hmac(
        "gym_admin.registration.password", f"{email}:{otp}", algorithm="sha256",
    ).digest()
    return Fernet(base64.urlsafe_b64encode(raw))


def _cache_key(email: str) -> str:
    return f"registration:pending:{email}"


@dataclass
class RegistrationResult:
    user: CustomUser
    gym: Gym


class RegistrationService:

    @classmethod
    def initiate(cls, *, name: str, email: str, phone: str, password: str,
                 gym_name: str, country: str = "") -> None:
        email = email.strip().lower()
        if CustomUser.objects.filter(email__iexact=email).exists():
            raise ValueError("User with this email already exists")

        otp = generate_otp()
        try:
            send_mail(
                subject="Your gym registration code",
                message=(
                    f"Your verification code is {otp}.\n"
                    f"It expires in {settings.OTP_TTL_SECONDS // 60} minutes."
                ),
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[email],
                fail_silently=False,
            )
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("OTP email to %s failed: %s", email, exc)
            raise OtpDeliveryError("Failed to send verification email") from exc

        cache.set(
            _cache_key(email),
            {
                "otp_digest": _otp_digest(email, otp),
                "attempts":   0,
                "expires_at": time.time() + settings.OTP_TTL_SECONDS,
                "data": {
                    "name": name, "email": email, "phone": phone,
                    "password": _password_box(email, otp).encrypt(password.encode()).decode(),
                    "gym_name": gym_name, "country": country,
                },
            },
            timeout=settings.OTP_TTL_SECONDS,
        )
        logger.info("[registration] OTP issued for %s", email)

    @classmethod
    def verify(cls, *, email: str, otp: str, client: IdentityClient = None) -> RegistrationResult:
        email   = email.strip().lower()
        key     = _cache_key(email)
        pending = cache.get(key)
        if pending is None:
            raise ValueError("Registration session expired or invalid")

        if not constant_time_compare(pending["otp_digest"], _otp_digest(email, str(otp).strip())):
            pending["attempts"] += 1
            if pending["attempts"] >= MAX_OTP_ATTEMPTS:
                cache.delete(key)
                logger.warning("[registration] too many wrong codes for %s", email)
            else:
                remaining = max(1, int(pending["expires_at"] - time.time()))
                cache.set(key, pending, timeout=remaining)
            raise ValueError("Invalid OTP")

        data     = pending["data"]
        password = _password_box(email, str(otp).strip()).decrypt(data["password"].encode()).decode()
        client   = client or IdentityClient()
        identity = client.sign_up(email, password)

        try:
            with transaction.atomic():
                gym = Gym.objects.create(
                    id=uuid.UUID(identity.id), name=data["gym_name"], country=data["country"] or "",
                )
                user = CustomUser.objects.create_user(
                    email=email, id=uuid.UUID(identity.id), name=data["name"],
                    phone=data["phone"] or "", role=Role.ADMIN, gym=gym,
                )
        except (DatabaseError, ValueError):
            logger.exception("[registration] profile creation failed for %s, rolling back", email)
            try:
                client.admin_delete_user(identity.id)
            except IdentityProviderError as exc:
                logger.error("[registration] rollback of provider user %s failed: %s", identity.id, exc)
            raise

        cache.delete(key)
        logger.info("[registration] gym %s registered by %s", gym.pk, email)
        return RegistrationResult(user=user, gym=gym)
