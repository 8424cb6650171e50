from django.urls import path

from ..views import catalogue_views

app_name = "batches"

urlpatterns = [
    path("",                  catalogue_views.BatchListView.as_view(),    name="list"),
    path("<int:pk>/",         catalogue_views.BatchDetailView.as_view(),  name="detail"),
    path("<int:pk>/members/", catalogue_views.BatchMembersView.as_view(), name="members"),
]
