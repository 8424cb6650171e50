"""
views/auth_views.py
─────────────────────────────────────────────────────────────────────
POST /api/auth/register/initiate/   email a one-time code
POST /api/auth/register/verify/     create provider account, gym and admin
POST /api/auth/login/               provider token + local profile
POST /api/auth/logout/              revoke the token, end the session
GET  /api/auth/me/
"""

from __future__ import annotations

import logging

from django.contrib.auth import logout

from ..exceptions import IdentityProviderError, Unauthorized
from ..forms.auth_forms import LoginForm, RegisterInitiateForm, RegisterVerifyForm
from ..middleware import forget_token
from ..models import CustomUser
from ..serializers import user_to_dict
from ..services.identity_service import IdentityClient
from ..services.registration_service import RegistrationService
from .base import ApiView

logger = logging.getLogger(__name__)


class RegisterInitiateView(ApiView):
    login_required = False

    def post(self, request):
        data = self.validate(RegisterInitiateForm, self.json_body()).cleaned_data
        RegistrationService.initiate(
            name     = data["name"],
            email    = data["email"],
            phone    = data.get("phone") or "",
            password = data["password"],
            gym_name = data["gymName"],
            country  = data.get("country") or "",
        )
        return self.ok({"email": data["email"].lower()}, "OTP sent to your email")


class RegisterVerifyView(ApiView):
    login_required = False

    def post(self, request):
        data   = self.validate(RegisterVerifyForm, self.json_body()).cleaned_data
        result = RegistrationService.verify(email=data["email"], otp=data["otp"])
        return self.ok(
            {"id": str(result.user.pk), "email": result.user.email, "gym_id": str(result.gym.pk)},
            "Registration completed successfully",
            status=201,
        )


class LoginView(ApiView):
    login_required = False

    def post(self, request):
        data = self.validate(LoginForm, self.json_body()).cleaned_data
        try:
            session = IdentityClient().sign_in(data["email"].lower(), data["password"])
        except IdentityProviderError as e:
            if e.status_code is None or e.status_code >= 500:
                raise
            raise Unauthorized("Invalid email or password")

        user = (CustomUser.objects.select_related("gym")
                .filter(pk=session.user.id, is_active=True).first())
        if user is None:
            logger.warning("[auth] provider login without local profile: %s", session.user.email)
            raise Unauthorized("User profile not found")

        return self.ok(
            {
                "user": user_to_dict(user),
                "session": {
                    "access_token":  session.access_token,
                    "refresh_token": session.refresh_token,
                    "expires_in":    session.expires_in,
                },
            },
            "Login successful",
        )


class LogoutView(ApiView):

    def post(self, request):
        token = getattr(request, "auth_token", None)
        if token:
            forget_token(token)
            try:
                IdentityClient().sign_out(token)
            except IdentityProviderError as exc:
                logger.warning("[auth] token revocation failed for %s: %s", request.user.email, exc)
        logger.info("[auth] %s logged out", request.user.email)
        logout(request)
        return self.ok(message="Logged out successfully")


class MeView(ApiView):

    def get(self, request):
        return self.ok(user_to_dict(request.user))
