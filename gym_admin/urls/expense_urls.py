from django.urls import path

from ..views import finance_views

app_name = "expenses"

urlpatterns = [
    path("",          finance_views.ExpenseListView.as_view(),   name="list"),
    path("summary/",  finance_views.ExpenseSummaryView.as_view(), name="summary"),
    path("<int:pk>/", finance_views.ExpenseDetailView.as_view(), name="detail"),
]
