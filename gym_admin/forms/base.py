"""
forms/base.py
─────────────────────────────────────────────────────────────────────
Helpers shared by the API forms.
"""
from __future__ import annotations

from django.forms.models import model_to_dict


class PartialUpdateMixin:
    """
    partial=True makes every field optional; present_data() then returns
    only the cleaned values the client actually sent.
    """

    def __init__(self, *args, partial: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.partial = partial
        if partial:
            for field in self.fields.values():
                field.required = False

    def present_data(self) -> dict:
        if not self.partial:
            return dict(self.cleaned_data)
        return {k: v for k, v in self.cleaned_data.items() if k in self.data}


def merged_with_instance(instance, payload: dict, fields) -> dict:
    """Current values of `instance` overlaid with the request payload."""
    data = model_to_dict(instance, fields=fields)
    data = {k: v for k, v in data.items() if v is not None}
    data.update({k: v for k, v in payload.items() if k in fields})
    return data
