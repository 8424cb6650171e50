from django.urls import path

from ..views import enquiry_views

app_name = "enquiries"

urlpatterns = [
    path("",                 enquiry_views.EnquiryListView.as_view(),   name="list"),
    path("<int:pk>/",        enquiry_views.EnquiryDetailView.as_view(), name="detail"),
    path("<int:pk>/status/", enquiry_views.EnquiryStatusView.as_view(), name="status"),
]
