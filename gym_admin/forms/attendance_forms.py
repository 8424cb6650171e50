"""
forms/attendance_forms.py
"""
from __future__ import annotations

from django import forms
from django.utils.translation import gettext_lazy as _

from ..models import Attendance, Batch, Member


class AttendanceForm(forms.Form):
    member_id = forms.ModelChoiceField(
        queryset=Member.objects.none(),
        error_messages={"invalid_choice": _("Member not found")},
    )
    date   = forms.DateField()
    status = forms.ChoiceField(choices=Attendance.Status.choices)

    def __init__(self, *args, scope, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["member_id"].queryset = scope.members()


class BatchAttendanceForm(forms.Form):
    batch_id = forms.ModelChoiceField(
        queryset=Batch.objects.none(),
        error_messages={"invalid_choice": _("Batch not found")},
    )
    date = forms.DateField()

    def __init__(self, *args, scope, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["batch_id"].queryset = scope.batches()
