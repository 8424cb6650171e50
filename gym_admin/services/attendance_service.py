"""
services/attendance_service.py
─────────────────────────────────────────────────────────────────────
Attendance recording (single + whole batch) and the period report.
No request/response dependencies; views only translate JSON.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from django.db import transaction

from ..models import Attendance, Batch, Member
from ..repository import TenantScope

logger = logging.getLogger(__name__)

VALID_STATUSES = {choice for choice, _label in Attendance.Status.choices}


@dataclass
class BatchAttendanceResult:
    batch: Batch
    date: datetime.date
    created_count: int
    updated_count: int

    @property
    def record_count(self) -> int:
        return self.created_count + self.updated_count


class AttendanceService:

    # ── 1. Single mark ───────────────────────────────────────────────

    @classmethod
    @transaction.atomic
    def record(
        cls, scope: TenantScope, member: Member, date: datetime.date, status: str
    ) -> tuple[Attendance, bool]:
        """
        Upsert the mark for (member, date). Returns (record, created);
        a second mark for the same day overwrites the first.
        """
        if status not in VALID_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(sorted(VALID_STATUSES))}")
        if member.gym_id != scope.gym_id:
            raise PermissionError("Member does not belong to this gym")

        record, created = Attendance.objects.update_or_create(
            member=member, date=date,
            defaults={"status": status, "gym_id": scope.gym_id},
        )
        logger.debug(
            "[attendance] gym=%s member=%s %s → %s (%s)",
            scope.gym_id, member.pk, date, status, "created" if created else "updated",
        )
        return record, created

    # ── 2. Whole batch ───────────────────────────────────────────────

    @classmethod
    @transaction.atomic
    def record_batch(
        cls, scope: TenantScope, batch: Batch, date: datetime.date, entries: List[Dict]
    ) -> BatchAttendanceResult:
        """
        entries: [{"member_id": 12, "status": "present"}, ...]

        Every member must belong to this gym; unknown ids abort the whole
        batch so a partial sheet is never stored.
        """
        if batch.gym_id != scope.gym_id:
            raise PermissionError("Batch does not belong to this gym")

        wanted: Dict[int, str] = {}
        for item in entries:
            try:
                member_id = int(item["member_id"])
            except (KeyError, TypeError, ValueError):
                raise ValueError("every entry needs a numeric member_id")
            status = item.get("status")
            if status not in VALID_STATUSES:
                raise ValueError(f"invalid status for member {member_id}: {status!r}")
            wanted[member_id] = status

        members = scope.members().in_bulk(list(wanted))
        missing = sorted(set(wanted) - set(members))
        if missing:
            raise ValueError(f"unknown member ids: {', '.join(str(m) for m in missing)}")

        existing = {
            a.member_id: a
            for a in scope.attendance().filter(date=date, member_id__in=list(wanted))
        }
        to_create, to_update = [], []
        for member_id, status in wanted.items():
            if member_id in existing:
                rec = existing[member_id]
                rec.status = status
                to_update.append(rec)
            else:
                to_create.append(Attendance(
                    gym_id=scope.gym_id, member=members[member_id], date=date, status=status,
                ))
        Attendance.objects.bulk_create(to_create)
        if to_update:
            Attendance.objects.bulk_update(to_update, ["status"])

        logger.info(
            "[attendance] gym=%s batch=%s %s created:%d updated:%d",
            scope.gym_id, batch.pk, date, len(to_create), len(to_update),
        )
        return BatchAttendanceResult(
            batch=batch, date=date, created_count=len(to_create), updated_count=len(to_update),
        )

    # ── 3. Period report ─────────────────────────────────────────────

    @classmethod
    def report(
        cls,
        scope: TenantScope,
        start_date: datetime.date,
        end_date: datetime.date,
        member_id: Optional[int] = None,
    ) -> dict:
        if end_date < start_date:
            raise ValueError("end_date must not be before start_date")

        qs = scope.attendance().filter(date__gte=start_date, date__lte=end_date)
        if member_id:
            qs = qs.filter(member_id=member_id)

        # only days that have records, however wide the window
        daily = {}
        present = absent = 0
        for date, status in qs.order_by("date").values_list("date", "status"):
            counts = daily.setdefault(date.isoformat(), {"present": 0, "absent": 0})
            counts[status] += 1
            if status == Attendance.Status.PRESENT:
                present += 1
            else:
                absent += 1

        return {
            "period":     {"startDate": start_date.isoformat(), "endDate": end_date.isoformat()},
            "totalDays":  (end_date - start_date).days + 1,
            "attendance": {"present": present, "absent": absent},
            "dailyAttendance": daily,
        }
