from django.urls import path

from ..views import catalogue_views

app_name = "services"

urlpatterns = [
    path("",          catalogue_views.ServiceListView.as_view(),   name="list"),
    path("<int:pk>/", catalogue_views.ServiceDetailView.as_view(), name="detail"),
]
