from django.urls import path

from ..views import report_views

app_name = "reports"

urlpatterns = [
    path("expiring-memberships/", report_views.ExpiringMembershipsView.as_view(), name="expiring"),
    path("birthdays/",            report_views.UpcomingBirthdaysView.as_view(),   name="birthdays"),
    path("payment-status/",       report_views.PaymentStatusView.as_view(),       name="payment-status"),
    path("attendance-summary/",   report_views.AttendanceSummaryView.as_view(),   name="attendance-summary"),
    path("financial-summary/",    report_views.FinancialSummaryView.as_view(),    name="financial-summary"),
]
