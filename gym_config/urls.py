"""
gym_config/urls.py
─────────────────────────────────────────────────────────────────────
Master URL Router — every API resource is included here
"""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health_check(request):
    """Docker health-check endpoint."""
    return JsonResponse({"status": "ok"})


urlpatterns = [
    # ── Admin ─────────────────────────────────────────────────────────
    path("admin/", admin.site.urls),

    # ── Health Check ──────────────────────────────────────────────────
    path("health/", health_check, name="health"),

    # ── REST API ──────────────────────────────────────────────────────
    path("api/auth/",        include("gym_admin.urls.auth_urls",       namespace="auth")),
    path("api/members/",     include("gym_admin.urls.member_urls",     namespace="members")),
    path("api/plans/",       include("gym_admin.urls.plan_urls",       namespace="plans")),
    path("api/batches/",     include("gym_admin.urls.batch_urls",      namespace="batches")),
    path("api/services/",    include("gym_admin.urls.service_urls",    namespace="services")),
    path("api/payments/",    include("gym_admin.urls.payment_urls",    namespace="payments")),
    path("api/attendance/",  include("gym_admin.urls.attendance_urls", namespace="attendance")),
    path("api/staff/",       include("gym_admin.urls.staff_urls",      namespace="staff")),
    path("api/expenses/",    include("gym_admin.urls.expense_urls",    namespace="expenses")),
    path("api/enquiries/",   include("gym_admin.urls.enquiry_urls",    namespace="enquiries")),
    path("api/reports/",     include("gym_admin.urls.report_urls",     namespace="reports")),
]
