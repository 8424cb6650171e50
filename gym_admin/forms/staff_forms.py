"""
forms/staff_forms.py
"""
from __future__ import annotations

from django import forms

from ..models import Role
from .base import PartialUpdateMixin


class StaffForm(PartialUpdateMixin, forms.Form):
    name  = forms.CharField(max_length=255)
    email = forms.EmailField()
    phone = forms.CharField(max_length=20, required=False)
    role  = forms.ChoiceField(choices=Role.choices)

    def clean_role(self):
        return (self.cleaned_data.get("role") or "").lower()
