"""
views/base.py
─────────────────────────────────────────────────────────────────────
ApiView: JSON request parsing, form validation, pagination and the
error envelope shared by every API endpoint.

Success:    {"success": true, "message"?: ..., "data": ...}
Paginated:  {"success": true, "data": [...], "meta": {...}}
Error:      {"success": false, "status": "error", "code": ..., "message": ..., "errors"?: ...}
"""

from __future__ import annotations

import json
import logging
import math

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.db import IntegrityError
from django.http import Http404, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from ..exceptions import (
    ApiError,
    Forbidden,
    IdentityProviderError,
    NotFound,
    OtpDeliveryError,
    Unauthorized,
    UpstreamError,
    ValidationFailed,
)
from ..services.dates import parse_date

logger = logging.getLogger(__name__)


def error_response(status: int, code: str, message: str, errors=None) -> JsonResponse:
    body = {"success": False, "status": "error", "code": code, "message": message}
    if errors:
        body["errors"] = errors
    return JsonResponse(body, status=status)


@method_decorator(csrf_exempt, name="dispatch")
class ApiView(View):
    """Base class for token-authenticated JSON endpoints."""

    login_required = True

    def dispatch(self, request, *args, **kwargs):
        try:
            self.check_access(request)
            return super().dispatch(request, *args, **kwargs)
        except Exception as exc:
            return self.handle_exception(exc)

    def check_access(self, request):
        if self.login_required and not request.user.is_authenticated:
            raise Unauthorized(getattr(request, "auth_error", None))

    # ── Error mapping ────────────────────────────────────────────────
    def handle_exception(self, exc: Exception) -> JsonResponse:
        if isinstance(exc, ApiError):
            return error_response(exc.status_code, exc.code, exc.message, exc.errors)
        if isinstance(exc, (PermissionDenied, PermissionError)):
            return error_response(403, Forbidden.code, str(exc) or Forbidden.default_message)
        if isinstance(exc, (Http404, ObjectDoesNotExist)):
            return error_response(404, NotFound.code, str(exc) or NotFound.default_message)
        if isinstance(exc, IntegrityError):
            logger.warning("Integrity error on %s: %s", self.request.path, exc)
            return error_response(409, "DUPLICATE_ENTRY", "Duplicate entry found")
        if isinstance(exc, ValidationError):
            return error_response(400, ValidationFailed.code, "Validation Error",
                                  exc.message_dict if hasattr(exc, "error_dict") else {"__all__": exc.messages})
        if isinstance(exc, ValueError):
            return error_response(400, ValidationFailed.code, str(exc))
        if isinstance(exc, IdentityProviderError):
            if exc.status_code and 400 <= exc.status_code < 500:
                return error_response(400, ValidationFailed.code, str(exc))
            return error_response(502, UpstreamError.code, str(exc))
        if isinstance(exc, OtpDeliveryError):
            return error_response(500, "INTERNAL_SERVER_ERROR", str(exc))

        logger.exception("Unhandled error on %s %s", self.request.method, self.request.path)
        message = str(exc) if settings.DEBUG else "Internal Server Error"
        return error_response(500, "INTERNAL_SERVER_ERROR", message)

    # ── Request helpers ──────────────────────────────────────────────
    def json_body(self) -> dict:
        if not self.request.body:
            return {}
        try:
            payload = json.loads(self.request.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationFailed("Request body is not valid JSON")
        if not isinstance(payload, dict):
            raise ValidationFailed("Request body must be a JSON object")
        return payload

    def validate(self, form_class, data: dict, **form_kwargs):
        """Bound, valid form or ValidationFailed with per-field messages."""
        form = form_class(data=data, **form_kwargs)
        if not form.is_valid():
            errors = {field: [e["message"] for e in errs]
                      for field, errs in form.errors.get_json_data().items()}
            raise ValidationFailed("Validation Error", errors=errors)
        return form

    def get_object(self, queryset, pk, label: str = "Resource"):
        try:
            return queryset.get(pk=pk)
        except queryset.model.DoesNotExist:
            raise NotFound(f"{label} not found")

    def query_date(self, name: str, required: bool = False):
        value = self.request.GET.get(name)
        if not value:
            if required:
                raise ValidationFailed("Start date and end date are required")
            return None
        return parse_date(value, name)

    def query_int(self, name: str, default: int, minimum: int = 0, maximum: int = None) -> int:
        try:
            value = int(self.request.GET.get(name, default))
        except (TypeError, ValueError):
            raise ValidationFailed(f"{name} must be an integer")
        value = max(value, minimum)
        return value if maximum is None else min(value, maximum)

    def date_window(self):
        """Required start_date / end_date pair, end not before start."""
        start = self.query_date("start_date", required=True)
        end   = self.query_date("end_date", required=True)
        if end < start:
            raise ValidationFailed("end_date must not be before start_date")
        return start, end

    # ── Response helpers ─────────────────────────────────────────────
    @staticmethod
    def ok(data=None, message: str = None, status: int = 200) -> JsonResponse:
        body = {"success": True}
        if message:
            body["message"] = message
        if data is not None:
            body["data"] = data
        return JsonResponse(body, status=status)

    def paginated(self, queryset, serialize) -> JsonResponse:
        """
        page / limit from the query string (defaults 1 / API_PAGE_SIZE).
        Pages past the end return an empty list, not an error.
        """
        page  = self.query_int("page", 1, minimum=1)
        limit = min(self.query_int("limit", settings.API_PAGE_SIZE, minimum=1),
                    settings.API_MAX_PAGE_SIZE)
        total = queryset.count()
        start = (page - 1) * limit
        items = [serialize(obj) for obj in queryset[start:start + limit]]
        total_pages = math.ceil(total / limit)
        return JsonResponse({
            "success": True,
            "data": items,
            "meta": {
                "total":       total,
                "page":        page,
                "limit":       limit,
                "totalPages":  total_pages,
                "hasNextPage": page < total_pages,
                "hasPrevPage": page > 1,
            },
        })
