"""
tests/test_attendance.py
─────────────────────────────────────────────────────────────────────
AttendanceService: single upsert, whole-batch sheets, period report.
"""
from __future__ import annotations

import datetime

import pytest

from gym_admin.models import Attendance, Batch
from gym_admin.services.attendance_service import AttendanceService

D = datetime.date

pytestmark = pytest.mark.django_db


class TestSingleMark:

    def test_second_mark_same_day_overwrites(self, scope, make_member):
        member = make_member()

        first, created = AttendanceService.record(scope, member, D(2024, 5, 1), "present")
        second, created_again = AttendanceService.record(scope, member, D(2024, 5, 1), "absent")

        assert created is True
        assert created_again is False
        assert first.pk == second.pk
        assert Attendance.objects.get().status == "absent"

    def test_invalid_status(self, scope, make_member):
        with pytest.raises(ValueError, match="status must be one of"):
            AttendanceService.record(scope, make_member(), D(2024, 5, 1), "late")

    def test_foreign_member(self, scope, other_gym, make_member):
        stranger = make_member(target_gym=other_gym, plan=None)
        with pytest.raises(PermissionError):
            AttendanceService.record(scope, stranger, D(2024, 5, 1), "present")


class TestBatchSheet:

    def test_creates_and_updates(self, scope, make_member, morning_batch):
        a, b = make_member("A", batch=morning_batch), make_member("B", batch=morning_batch)
        AttendanceService.record(scope, a, D(2024, 5, 1), "absent")

        result = AttendanceService.record_batch(scope, morning_batch, D(2024, 5, 1), [
            {"member_id": a.pk, "status": "present"},
            {"member_id": str(b.pk), "status": "absent"},
        ])

        assert (result.created_count, result.updated_count, result.record_count) == (1, 1, 2)
        marks = dict(Attendance.objects.values_list("member_id", "status"))
        assert marks == {a.pk: "present", b.pk: "absent"}

    def test_unknown_member_aborts_everything(self, scope, other_gym, make_member, morning_batch):
        mine = make_member("Mine")
        theirs = make_member("Theirs", target_gym=other_gym, plan=None)

        with pytest.raises(ValueError, match=str(theirs.pk)):
            AttendanceService.record_batch(scope, morning_batch, D(2024, 5, 1), [
                {"member_id": mine.pk, "status": "present"},
                {"member_id": theirs.pk, "status": "present"},
            ])
        assert not Attendance.objects.exists()

    @pytest.mark.parametrize("entry", [
        {"status": "present"},
        {"member_id": "abc", "status": "present"},
    ])
    def test_malformed_member_id(self, scope, morning_batch, entry):
        with pytest.raises(ValueError, match="member_id"):
            AttendanceService.record_batch(scope, morning_batch, D(2024, 5, 1), [entry])

    def test_bad_status(self, scope, make_member, morning_batch):
        member = make_member()
        with pytest.raises(ValueError, match="invalid status"):
            AttendanceService.record_batch(scope, morning_batch, D(2024, 5, 1),
                                           [{"member_id": member.pk, "status": "maybe"}])

    def test_foreign_batch(self, scope, other_gym):
        batch = Batch.objects.create(gym=other_gym, name="Evening")
        with pytest.raises(PermissionError):
            AttendanceService.record_batch(scope, batch, D(2024, 5, 1), [])


class TestPeriodReport:

    def test_counts_and_non_empty_days(self, scope, make_member):
        a, b = make_member("A"), make_member("B")
        AttendanceService.record(scope, a, D(2024, 5, 1), "present")
        AttendanceService.record(scope, b, D(2024, 5, 1), "absent")
        AttendanceService.record(scope, a, D(2024, 5, 3), "present")

        report = AttendanceService.report(scope, D(2024, 5, 1), D(2024, 5, 7))

        assert report["period"] == {"startDate": "2024-05-01", "endDate": "2024-05-07"}
        assert report["totalDays"] == 7
        assert report["attendance"] == {"present": 2, "absent": 1}
        assert report["dailyAttendance"] == {
            "2024-05-01": {"present": 1, "absent": 1},
            "2024-05-03": {"present": 1, "absent": 0},
        }

    def test_single_member_filter(self, scope, make_member):
        a, b = make_member("A"), make_member("B")
        AttendanceService.record(scope, a, D(2024, 5, 1), "present")
        AttendanceService.record(scope, b, D(2024, 5, 1), "present")

        report = AttendanceService.report(scope, D(2024, 5, 1), D(2024, 5, 1), member_id=b.pk)
        assert report["attendance"] == {"present": 1, "absent": 0}

    def test_widest_window_lists_only_recorded_days(self, scope, make_member):
        a = make_member("A")
        AttendanceService.record(scope, a, D(2024, 5, 1), "present")

        report = AttendanceService.report(scope, D(1, 1, 1), D(9999, 12, 31))

        assert report["totalDays"] == (D(9999, 12, 31) - D(1, 1, 1)).days + 1
        assert report["dailyAttendance"] == {"2024-05-01": {"present": 1, "absent": 0}}

    def test_reversed_window_rejected(self, scope):
        with pytest.raises(ValueError):
            AttendanceService.report(scope, D(2024, 5, 2), D(2024, 5, 1))
