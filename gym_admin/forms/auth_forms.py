"""
forms/auth_forms.py
─────────────────────────────────────────────────────────────────────
Registration (two-step, OTP) and login payloads.
"""
from __future__ import annotations

from django import forms
from django.contrib.auth.password_validation import validate_password


class RegisterInitiateForm(forms.Form):
    name     = forms.CharField(max_length=255)
    email    = forms.EmailField()
    phone    = forms.CharField(max_length=20, required=False)
    password = forms.CharField(min_length=8, strip=False)
    gymName  = forms.CharField(max_length=255)
    country  = forms.CharField(max_length=100, required=False)

    def clean_password(self):
        password = self.cleaned_data["password"]
        validate_password(password)
        return password


class RegisterVerifyForm(forms.Form):
    email = forms.EmailField()
    otp   = forms.RegexField(regex=r"^\d{6}$", error_messages={"invalid": "OTP must be 6 digits"})


class LoginForm(forms.Form):
    email    = forms.EmailField()
    password = forms.CharField(strip=False)
