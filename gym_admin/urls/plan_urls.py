from django.urls import path

from ..views import catalogue_views

app_name = "plans"

urlpatterns = [
    path("",          catalogue_views.PlanListView.as_view(),   name="list"),
    path("<int:pk>/", catalogue_views.PlanDetailView.as_view(), name="detail"),
]
