"""
serializers.py
─────────────────────────────────────────────────────────────────────
Model → JSON-ready dict. Money leaves as float, dates as ISO strings.
"""
from __future__ import annotations


def _money(value):
    return float(value) if value is not None else None


def _date(value):
    return value.isoformat() if value else None


def plan_to_dict(plan) -> dict:
    return {
        "id":                 plan.pk,
        "name":               plan.name,
        "duration_in_months": plan.duration_in_months,
        "price":              _money(plan.price),
        "description":        plan.description,
    }


def batch_to_dict(batch) -> dict:
    return {"id": batch.pk, "name": batch.name, "schedule_time": batch.schedule_time}


def service_to_dict(service) -> dict:
    return {
        "id":          service.pk,
        "name":        service.name,
        "description": service.description,
        "price":       _money(service.price),
    }


def member_to_dict(member) -> dict:
    return {
        "id":             member.pk,
        "name":           member.name,
        "phone":          member.phone,
        "email":          member.email,
        "dob":            _date(member.dob),
        "gender":         member.gender,
        "status":         member.status,
        "plan_id":        member.plan_id,
        "batch_id":       member.batch_id,
        "plans":          plan_to_dict(member.plan) if member.plan_id else None,
        "batches":        batch_to_dict(member.batch) if member.batch_id else None,
        "join_date":      _date(member.join_date),
        "plan_end_date":  _date(member.plan_end_date),
        "discount_value": _money(member.discount_value),
        "admission_fees": _money(member.admission_fees),
        "created_at":     member.created_at.isoformat() if member.created_at else None,
    }


def payment_to_dict(payment, with_member: bool = True) -> dict:
    data = {
        "id":             payment.pk,
        "member_id":      payment.member_id,
        "amount_paid":    _money(payment.amount_paid),
        "total_amount":   _money(payment.total_amount),
        "due_amount":     _money(payment.due_amount),
        "payment_date":   _date(payment.payment_date),
        "payment_method": payment.payment_method,
        "payment_kind":   payment.payment_kind,
        "notes":          payment.notes,
    }
    if with_member:
        data["members"] = {"id": payment.member_id, "name": payment.member.name}
    return data


def attendance_to_dict(record) -> dict:
    return {
        "id":        record.pk,
        "member_id": record.member_id,
        "members":   {"id": record.member_id, "name": record.member.name},
        "date":      _date(record.date),
        "status":    record.status,
    }


def staff_to_dict(staff) -> dict:
    return {
        "id":          staff.pk,
        "user_id":     str(staff.user_id) if staff.user_id else None,
        "name":        staff.name,
        "email":       staff.email,
        "phone":       staff.phone,
        "role":        staff.role,
        "permissions": staff.permissions,
    }


def expense_to_dict(expense) -> dict:
    return {
        "id":       expense.pk,
        "title":    expense.title,
        "amount":   _money(expense.amount),
        "date":     _date(expense.date),
        "category": expense.category,
        "notes":    expense.notes,
    }


def enquiry_to_dict(enquiry) -> dict:
    return {
        "id":         enquiry.pk,
        "name":       enquiry.name,
        "phone":      enquiry.phone,
        "email":      enquiry.email,
        "message":    enquiry.message,
        "status":     enquiry.status,
        "created_at": enquiry.created_at.isoformat() if enquiry.created_at else None,
    }


def user_to_dict(user) -> dict:
    return {
        "id":     str(user.pk),
        "email":  user.email,
        "name":   user.name,
        "phone":  user.phone,
        "role":   user.role,
        "gym_id": str(user.gym_id) if user.gym_id else None,
    }
