"""
forms/member_forms.py
─────────────────────────────────────────────────────────────────────
Member create / update / renew. Plan and batch choices are limited to
the caller's gym, so an id from another tenant is simply "not a valid
choice".
"""
from __future__ import annotations

from django import forms
from django.core.validators import MinValueValidator
from django.utils.translation import gettext_lazy as _

from ..models import Batch, Member, Payment, Plan
from .base import PartialUpdateMixin


class MemberForm(PartialUpdateMixin, forms.Form):

    # ─── profile ──────────────────────────────────────────────────
    name   = forms.CharField(max_length=255)
    phone  = forms.CharField(max_length=20)
    email  = forms.EmailField(required=False)
    dob    = forms.DateField(required=False)
    gender = forms.ChoiceField(choices=Member.Gender.choices, required=False)
    status = forms.ChoiceField(choices=Member.Status.choices, required=False)

    # ─── membership ───────────────────────────────────────────────
    plan_id   = forms.ModelChoiceField(
        queryset=Plan.objects.none(),
        error_messages={"invalid_choice": _("Invalid plan selected")},
    )
    batch_id  = forms.ModelChoiceField(
        queryset=Batch.objects.none(), required=False,
        error_messages={"invalid_choice": _("Invalid batch selected")},
    )
    join_date      = forms.DateField(required=False)
    discount_value = forms.DecimalField(max_digits=12, decimal_places=2, required=False,
                                        validators=[MinValueValidator(0)])
    admission_fees = forms.DecimalField(max_digits=12, decimal_places=2, required=False,
                                        validators=[MinValueValidator(0)])
    payment_method = forms.ChoiceField(choices=Payment.Method.choices, required=False)

    def __init__(self, *args, scope, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["plan_id"].queryset  = scope.plans()
        self.fields["batch_id"].queryset = scope.batches()

    def clean(self):
        cleaned = super().clean()
        if self.partial:
            # a partial edit may omit these but never blank them
            for name in ("name", "phone"):
                if name in self.data and name not in self.errors and not cleaned.get(name):
                    self.add_error(name, _("This field may not be blank."))
        return cleaned

    def service_data(self) -> dict:
        """cleaned data keyed the way MemberService expects (plan, batch)."""
        data = self.present_data()
        if "plan_id" in data:
            data["plan"] = data.pop("plan_id")
        if "batch_id" in data:
            data["batch"] = data.pop("batch_id")
        for key in ("email", "gender"):
            if key in data and data[key] is None:
                data[key] = ""
        if self.partial:
            # creation-only fields
            for key in ("join_date", "admission_fees", "payment_method"):
                data.pop(key, None)
            if data.get("status") == "":
                data.pop("status")
            # an explicit null leaves these unchanged
            for key in ("plan", "discount_value"):
                if key in data and data[key] is None:
                    data.pop(key)
        return data


class RenewMemberForm(forms.Form):
    plan_id        = forms.ModelChoiceField(
        queryset=Plan.objects.none(), required=False,
        error_messages={"invalid_choice": _("Invalid plan selected")},
    )
    amount_paid    = forms.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    total_amount   = forms.DecimalField(max_digits=12, decimal_places=2, required=False,
                                        validators=[MinValueValidator(0)])
    payment_date   = forms.DateField(required=False)
    payment_method = forms.ChoiceField(choices=Payment.Method.choices, required=False)
    notes          = forms.CharField(required=False)

    def __init__(self, *args, scope, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["plan_id"].queryset = scope.plans()
