"""
forms/finance_forms.py
─────────────────────────────────────────────────────────────────────
Payment input. due_amount is never accepted from the client.
"""
from __future__ import annotations

from django import forms
from django.core.validators import MinValueValidator
from django.utils.translation import gettext_lazy as _

from ..models import Member, Payment
from .base import PartialUpdateMixin


class PaymentForm(PartialUpdateMixin, forms.Form):
    member_id      = forms.ModelChoiceField(
        queryset=Member.objects.none(),
        error_messages={"invalid_choice": _("Member not found")},
    )
    amount_paid    = forms.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    total_amount   = forms.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    payment_date   = forms.DateField(required=False)
    payment_method = forms.ChoiceField(choices=Payment.Method.choices, required=False)
    payment_kind   = forms.ChoiceField(choices=Payment.Kind.choices, required=False)
    notes          = forms.CharField(required=False)

    def __init__(self, *args, scope, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["member_id"].queryset = scope.members()
