"""
services/identity_service.py
─────────────────────────────────────────────────────────────────────
HTTP client for the external identity provider.

The provider issues access tokens and stores passwords; this backend
only keeps a local profile (CustomUser) keyed by the provider's user id.

Endpoints used:
  POST {base}/token?grant_type=password   email+password → access token
  GET  {base}/user                        bearer token   → user
  POST {base}/signup                      email+password → user
  POST {base}/admin/users                 service key    → user (staff)
  POST {base}/logout                      bearer token   → revoke session
  DELETE {base}/admin/users/<id>          service key    → rollback
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests
from django.conf import settings

from ..exceptions import IdentityProviderError

logger = logging.getLogger(__name__)


@dataclass
class IdentityUser:
    id: str
    email: str


@dataclass
class IdentitySession:
    access_token: str
    refresh_token: str
    expires_in: Optional[int]
    user: IdentityUser


class IdentityClient:
    """Thin wrapper around the provider's REST API."""

    def __init__(self, base_url: str = None, api_key: str = None,
                 service_key: str = None, timeout: int = None):
        self.base_url    = (base_url or settings.IDENTITY_PROVIDER_URL).rstrip("/")
        self.api_key     = api_key if api_key is not None else settings.IDENTITY_PROVIDER_API_KEY
        self.service_key = service_key if service_key is not None else settings.IDENTITY_SERVICE_KEY
        self.timeout     = timeout or settings.IDENTITY_TIMEOUT_SECONDS

    # ── helpers ──────────────────────────────────────────────────────
    def _headers(self, bearer: str = None) -> dict:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    def _request(self, method: str, path: str, *, bearer: str = None, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(
                method, url, headers=self._headers(bearer), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error("Identity provider unreachable (%s %s): %s", method, path, e)
            raise IdentityProviderError("Identity provider unreachable") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = (
                body.get("msg") or body.get("error_description")
                or body.get("message") or body.get("error") or "Identity provider error"
            )
            logger.warning("Identity provider %s %s → %s: %s",
                           method, path, response.status_code, message)
            raise IdentityProviderError(message, status_code=response.status_code)

        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _user(data: dict) -> IdentityUser:
        user = data.get("user", data)
        if not user.get("id"):
            raise IdentityProviderError("Identity provider returned no user id")
        return IdentityUser(id=str(user["id"]), email=user.get("email", ""))

    # ── API ──────────────────────────────────────────────────────────
    def sign_in(self, email: str, password: str) -> IdentitySession:
        data = self._request(
            "POST", "/token", params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return IdentitySession(
            access_token  = data.get("access_token", ""),
            refresh_token = data.get("refresh_token", ""),
            expires_in    = data.get("expires_in"),
            user          = self._user(data),
        )

    def get_user(self, access_token: str) -> IdentityUser:
        return self._user(self._request("GET", "/user", bearer=access_token))

    def sign_out(self, access_token: str) -> None:
        self._request("POST", "/logout", bearer=access_token)

    def sign_up(self, email: str, password: str) -> IdentityUser:
        return self._user(self._request("POST", "/signup", json={"email": email, "password": password}))

    def admin_create_user(self, email: str, password: str) -> IdentityUser:
        data = self._request(
            "POST", "/admin/users", bearer=self.service_key,
            json={"email": email, "password": password, "email_confirm": True},
        )
        return self._user(data)

    def admin_delete_user(self, user_id: str) -> None:
        self._request("DELETE", f"/admin/users/{user_id}", bearer=self.service_key)
