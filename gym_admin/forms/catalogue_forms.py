"""
forms/catalogue_forms.py
─────────────────────────────────────────────────────────────────────
Plans, batches, add-on services, expenses and enquiries: plain
ModelForms, the gym is set by the view.
"""
from __future__ import annotations

from django import forms
from django.utils.translation import gettext_lazy as _

from ..models import Batch, Enquiry, Expense, Plan, Service


class PlanForm(forms.ModelForm):
    class Meta:
        model  = Plan
        fields = ["name", "duration_in_months", "price", "description"]

    def clean_duration_in_months(self):
        value = self.cleaned_data["duration_in_months"]
        if value is None or value < 1:
            raise forms.ValidationError(_("Duration must be at least one month."))
        return value


class BatchForm(forms.ModelForm):
    class Meta:
        model  = Batch
        fields = ["name", "schedule_time"]


class ServiceForm(forms.ModelForm):
    class Meta:
        model  = Service
        fields = ["name", "description", "price"]


class ExpenseForm(forms.ModelForm):
    class Meta:
        model  = Expense
        fields = ["title", "amount", "date", "category", "notes"]


class EnquiryForm(forms.ModelForm):
    class Meta:
        model  = Enquiry
        fields = ["name", "phone", "email", "message", "status"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["status"].required = False

    def clean_status(self):
        return self.cleaned_data.get("status") or Enquiry.Status.OPEN


class EnquiryStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Enquiry.Status.choices)
