from django.urls import path

from ..views import attendance_views

app_name = "attendance"

urlpatterns = [
    path("",        attendance_views.AttendanceListView.as_view(),   name="list"),
    path("batch/",  attendance_views.BatchAttendanceView.as_view(),  name="batch"),
    path("report/", attendance_views.AttendanceReportView.as_view(), name="report"),
]
