from django.urls import path

from ..views import staff_views

app_name = "staff"

urlpatterns = [
    path("",                      staff_views.StaffListView.as_view(),        name="list"),
    path("<int:pk>/",             staff_views.StaffDetailView.as_view(),      name="detail"),
    path("<int:pk>/permissions/", staff_views.StaffPermissionsView.as_view(), name="permissions"),
]
