from django.urls import path

from ..views import member_views

app_name = "members"

urlpatterns = [
    path("",                         member_views.MemberListView.as_view(),          name="list"),
    # before <int:pk>/ so it is never read as a member id
    path("check-status/",            member_views.MemberStatusCheckView.as_view(),   name="check-status"),
    path("<int:pk>/",                member_views.MemberDetailView.as_view(),        name="detail"),
    path("<int:pk>/renew/",          member_views.MemberRenewView.as_view(),         name="renew"),
    path("<int:pk>/status-history/", member_views.MemberStatusHistoryView.as_view(), name="status-history"),
]
