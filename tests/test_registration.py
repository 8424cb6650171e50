"""
tests/test_registration.py
─────────────────────────────────────────────────────────────────────
Identity provider client (HTTP mocked) and the two-step OTP sign-up.
"""
from __future__ import annotations

import base64
import re
import uuid
from unittest import mock

import pytest
import requests
from django.core import mail
from django.core.cache import cache
from django.db import IntegrityError

from gym_admin.exceptions import IdentityProviderError
from gym_admin.models import CustomUser, Gym, Role
from gym_admin.services.identity_service import IdentityClient, IdentityUser
from gym_admin.services.registration_service import (
    MAX_OTP_ATTEMPTS,
    RegistrationService,
    generate_otp,
)


def _response(status=200, body=None):
    resp = mock.Mock(status_code=status, content=b"{}" if body is not None else b"")
    resp.json.return_value = body if body is not None else {}
    return resp


# ════════════════════════════════════════════════════════════════════
#  IdentityClient
# ════════════════════════════════════════════════════════════════════

class TestIdentityClient:

    @pytest.fixture
    def client(self):
        return IdentityClient(base_url="https://id.example/", api_key="anon",
                              service_key="service", timeout=5)

    def test_sign_in(self, client):
        body = {"access_token": "tok", "refresh_token": "ref", "expires_in": 3600,
                "user": {"id": "abc", "email": "a@b.test"}}
        with mock.patch("gym_admin.services.identity_service.requests.request",
                        return_value=_response(200, body)) as req:
            session = client.sign_in("a@b.test", "pw")

        assert session.access_token == "tok"
        assert session.user == IdentityUser(id="abc", email="a@b.test")
        args, kwargs = req.call_args
        assert args == ("POST", "https://id.example/token")
        assert kwargs["params"] == {"grant_type": "password"}
        assert kwargs["headers"]["apikey"] == "anon"
        assert kwargs["timeout"] == 5

    def test_admin_calls_use_service_key(self, client):
        with mock.patch("gym_admin.services.identity_service.requests.request",
                        return_value=_response(200, {"id": "u1", "email": "s@b.test"})) as req:
            client.admin_create_user("s@b.test", "temp")
        assert req.call_args.kwargs["headers"]["Authorization"] == "Bearer service"

    def test_error_status_raises_with_provider_message(self, client):
        with mock.patch("gym_admin.services.identity_service.requests.request",
                        return_value=_response(400, {"msg": "Invalid login credentials"})):
            with pytest.raises(IdentityProviderError) as excinfo:
                client.sign_in("a@b.test", "wrong")
        assert excinfo.value.status_code == 400
        assert "Invalid login credentials" in str(excinfo.value)

    def test_network_failure(self, client):
        with mock.patch("gym_admin.services.identity_service.requests.request",
                        side_effect=requests.ConnectionError("down")):
            with pytest.raises(IdentityProviderError) as excinfo:
                client.get_user("tok")
        assert excinfo.value.status_code is None

    def test_missing_user_id(self, client):
        with mock.patch("gym_admin.services.identity_service.requests.request",
                        return_value=_response(200, {"email": "x@y.test"})):
            with pytest.raises(IdentityProviderError):
                client.get_user("tok")

    def test_empty_body_on_delete(self, client):
        with mock.patch("gym_admin.services.identity_service.requests.request",
                        return_value=_response(204)):
            assert client.admin_delete_user("u1") is None


# ════════════════════════════════════════════════════════════════════
#  Registration
# ════════════════════════════════════════════════════════════════════

def _initiate(email="owner@newgym.test"):
    RegistrationService.initiate(
        name="Owner", email=email, phone="9999999999", password="s3cure-Passw0rd",
        gym_name="New Gym", country="IN",
    )
    return re.search(r"\b(\d{6})\b", mail.outbox[-1].body).group(1)


def _provider(user_id=None):
    client = mock.Mock(spec=IdentityClient)
    client.sign_up.return_value = IdentityUser(id=str(user_id or uuid.uuid4()), email="owner@newgym.test")
    return client


@pytest.mark.django_db
class TestRegistration:

    def test_otp_format(self):
        assert re.fullmatch(r"\d{6}", generate_otp())

    def test_initiate_emails_code_and_keeps_no_plain_otp(self):
        otp = _initiate()

        assert mail.outbox[-1].to == ["owner@newgym.test"]
        pending = cache.get("registration:pending:owner@newgym.test")
        assert pending["data"]["gym_name"] == "New Gym"
        assert otp not in str(pending["otp_digest"])

    def test_cached_password_is_not_readable(self):
        _initiate()

        stored = cache.get("registration:pending:owner@newgym.test")["data"]["password"]
        assert "s3cure-Passw0rd" not in stored
        assert "Passw0rd" not in base64.urlsafe_b64decode(stored.encode()).decode("latin-1")

    def test_existing_email_rejected(self, admin_user):
        with pytest.raises(ValueError, match="already exists"):
            RegistrationService.initiate(
                name="X", email=admin_user.email.upper(), phone="", password="s3cure-Passw0rd",
                gym_name="Dup",
            )
        assert mail.outbox == []

    def test_verify_creates_gym_and_admin(self):
        otp = _initiate()
        user_id = uuid.uuid4()
        provider = _provider(user_id)

        result = RegistrationService.verify(email="Owner@NewGym.test", otp=otp, client=provider)

        provider.sign_up.assert_called_once_with("owner@newgym.test", "s3cure-Passw0rd")
        assert result.gym.pk == user_id
        assert result.user.pk == user_id
        assert result.user.role == Role.ADMIN
        assert result.user.gym_id == user_id
        assert result.gym.name == "New Gym"
        assert not result.user.has_usable_password()
        assert cache.get("registration:pending:owner@newgym.test") is None

    def test_unknown_email(self):
        with pytest.raises(ValueError, match="expired or invalid"):
            RegistrationService.verify(email="nobody@x.test", otp="123456", client=_provider())

    def test_wrong_code_keeps_session_until_limit(self):
        otp = _initiate()
        wrong = "000000" if otp != "000000" else "111111"
        provider = _provider()

        for _ in range(MAX_OTP_ATTEMPTS - 1):
            with pytest.raises(ValueError, match="Invalid OTP"):
                RegistrationService.verify(email="owner@newgym.test", otp=wrong, client=provider)
        assert cache.get("registration:pending:owner@newgym.test")["attempts"] == MAX_OTP_ATTEMPTS - 1

        with pytest.raises(ValueError, match="Invalid OTP"):
            RegistrationService.verify(email="owner@newgym.test", otp=wrong, client=provider)
        with pytest.raises(ValueError, match="expired or invalid"):
            RegistrationService.verify(email="owner@newgym.test", otp=otp, client=provider)
        provider.sign_up.assert_not_called()

    def test_profile_failure_rolls_back_provider_account(self, gym):
        otp = _initiate()
        provider = _provider(gym.pk)   # id collides with an existing gym

        with pytest.raises(IntegrityError):
            RegistrationService.verify(email="owner@newgym.test", otp=otp, client=provider)

        provider.admin_delete_user.assert_called_once_with(str(gym.pk))
        assert not CustomUser.objects.filter(email="owner@newgym.test").exists()
        assert Gym.objects.count() == 1

    def test_provider_refusal_propagates(self):
        otp = _initiate()
        provider = _provider()
        provider.sign_up.side_effect = IdentityProviderError("User already registered", status_code=422)

        with pytest.raises(IdentityProviderError):
            RegistrationService.verify(email="owner@newgym.test", otp=otp, client=provider)
        assert Gym.objects.count() == 0
