from django.urls import path

from ..views import payment_views

app_name = "payments"

urlpatterns = [
    path("",                         payment_views.PaymentListView.as_view(),    name="list"),
    path("summary/",                 payment_views.PaymentSummaryView.as_view(), name="summary"),
    path("member/<int:member_pk>/",  payment_views.MemberPaymentsView.as_view(), name="member"),
    path("<int:pk>/",                payment_views.PaymentDetailView.as_view(),  name="detail"),
]
