"""
views/attendance_views.py
─────────────────────────────────────────────────────────────────────
GET   /api/attendance/            list (member_id, date, batch_id, status)
POST  /api/attendance/            record one mark (upsert on member + date)
POST  /api/attendance/batch/      record a whole batch for one date
GET   /api/attendance/report/     period report (start_date, end_date, member_id?)

body for /batch/ (JSON):
{
    "batch_id": 3,
    "date": "2024-05-01",
    "attendanceData": [
        {"member_id": 42, "status": "present"},
        {"member_id": 17, "status": "absent"}
    ]
}
"""

from __future__ import annotations

from ..exceptions import ValidationFailed
from ..forms.attendance_forms import AttendanceForm, BatchAttendanceForm
from ..mixins import ALL_ROLES, RoleRequiredMixin, TenantScopedMixin
from ..serializers import attendance_to_dict
from ..services.attendance_service import AttendanceService
from .base import ApiView


class AttendanceListView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    method_roles = {"post": ALL_ROLES}

    def get(self, request):
        qs = self.scope.attendance().select_related("member").order_by("-date", "member__name")
        if request.GET.get("member_id"):
            qs = qs.filter(member_id=self.query_int("member_id", 0))
        if request.GET.get("batch_id"):
            qs = qs.filter(member__batch_id=self.query_int("batch_id", 0))
        date = self.query_date("date")
        if date:
            qs = qs.filter(date=date)
        if request.GET.get("status"):
            qs = qs.filter(status=request.GET["status"])
        return self.paginated(qs, attendance_to_dict)

    def post(self, request):
        form = self.validate(AttendanceForm, self.json_body(), scope=self.scope)
        data = form.cleaned_data
        record, created = AttendanceService.record(
            self.scope, data["member_id"], data["date"], data["status"],
        )
        if created:
            return self.ok(attendance_to_dict(record), "Attendance recorded successfully", status=201)
        return self.ok(attendance_to_dict(record), "Attendance updated successfully")


class BatchAttendanceView(RoleRequiredMixin, TenantScopedMixin, ApiView):
    allowed_roles = ALL_ROLES

    def post(self, request):
        body = self.json_body()
        form = self.validate(BatchAttendanceForm, body, scope=self.scope)
        entries = body.get("attendanceData")
        if not isinstance(entries, list) or not entries:
            raise ValidationFailed("attendanceData must be a non-empty list")

        result = AttendanceService.record_batch(
            self.scope, form.cleaned_data["batch_id"], form.cleaned_data["date"], entries,
        )
        return self.ok(
            {
                "date":        result.date.isoformat(),
                "batch_id":    result.batch.pk,
                "recordCount": result.record_count,
                "created":     result.created_count,
                "updated":     result.updated_count,
            },
            "Batch attendance recorded successfully",
            status=201,
        )


class AttendanceReportView(RoleRequiredMixin, TenantScopedMixin, ApiView):

    def get(self, request):
        start = self.query_date("start_date", required=True)
        end   = self.query_date("end_date", required=True)
        member_id = self.query_int("member_id", 0) or None
        return self.ok(AttendanceService.report(self.scope, start, end, member_id))
