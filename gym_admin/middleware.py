"""
middleware.py
─────────────────────────────────────────────────────────────────────
Bearer-token authentication against the identity provider.

`Authorization: Bearer <token>` replaces request.user with the local
profile of the provider user. Lookups are cached for
IDENTITY_CACHE_SECONDS so the provider is not hit on every request.
Requests without the header keep the session user (admin site).
"""
from __future__ import annotations

import hashlib
import logging

from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from django.core.exceptions import ValidationError

from .exceptions import IdentityProviderError
from .models import CustomUser
from .services.identity_service import IdentityClient

logger = logging.getLogger(__name__)


def _token_cache_key(token: str) -> str:
    return "identity:token:" + hashlib.sha256(token.encode()).hexdigest()


def forget_token(token: str) -> None:
    """Drop the cached lookup so the token must be verified again."""
    cache.delete(_token_cache_key(token))


def authenticate_token(token: str):
    """Return the active CustomUser owning `token`, or None."""
    key = _token_cache_key(token)
    user_id = cache.get(key)
    if user_id is None:
        try:
            user_id = IdentityClient().get_user(token).id
        except IdentityProviderError as e:
            logger.info("Token rejected by identity provider: %s", e)
            return None
        cache.set(key, user_id, timeout=settings.IDENTITY_CACHE_SECONDS)

    try:
        return CustomUser.objects.select_related("gym").get(pk=user_id, is_active=True)
    except (CustomUser.DoesNotExist, ValidationError, ValueError):
        logger.info("No active profile for identity user %s", user_id)
        return None


class BearerTokenAuthenticationMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if header.startswith("Bearer "):
            token = header[len("Bearer "):].strip()
            user = authenticate_token(token) if token else None
            request.user = user or AnonymousUser()
            request.auth_token = token or None
            request.auth_error = None if user else "Invalid or expired token"
        return self.get_response(request)
