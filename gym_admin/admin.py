"""
admin.py
─────────────────────────────────────────────────────────────────────
Django admin for support staff. Edits to a member's status or
plan_end_date made here are audited by signals.py like any other save.
"""

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .exceptions import TenantSweepError
from .models import (
    Attendance, Batch, CustomUser, Enquiry, Expense, Gym, Member,
    MemberStatusLog, Payment, Plan, Service, Staff,
)
from .services.membership_service import reconcile_gym

# ── Site branding ────────────────────────────────────────────────────
admin.site.site_header  = _("Gym Administration")
admin.site.site_title   = _("Gym Admin")
admin.site.index_title  = _("Home")


# ════════════════════════════════════════════════════════════════════
#  Gym
# ════════════════════════════════════════════════════════════════════

@admin.register(Gym)
class GymAdmin(admin.ModelAdmin):
    list_display  = ("name", "country", "auto_inactive_members", "created_at")
    list_filter   = ("auto_inactive_members", "country")
    search_fields = ("name",)
    actions       = ["run_status_check"]

    @admin.action(description=_("Run member status check now"))
    def run_status_check(self, request, queryset):
        for gym in queryset:
            try:
                result = reconcile_gym(gym.pk)
            except TenantSweepError as e:
                self.message_user(request, f"{gym.name}: {e.cause}", level=messages.ERROR)
                continue
            self.message_user(
                request,
                f"{gym.name}: checked {result.total_checked}, updated {result.total_updated}",
            )


# ════════════════════════════════════════════════════════════════════
#  CustomUser
# ════════════════════════════════════════════════════════════════════

@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display   = ("email", "name", "gym", "role", "is_active")
    list_filter    = ("role", "is_active", "is_staff")
    search_fields  = ("email", "name", "phone")
    ordering       = ("email",)
    readonly_fields = ("id", "date_joined", "last_login")

    fieldsets = (
        (_("Login"),       {"fields": ("id", "email", "password")}),
        (_("Profile"),     {"fields": ("name", "phone", "gym", "role")}),
        (_("Permissions"), {"fields": ("is_active", "is_staff", "is_superuser",
                                       "groups", "user_permissions")}),
        (_("Dates"),       {"fields": ("date_joined", "last_login")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": (
            "email", "name", "gym", "role", "password1", "password2",
        )}),
    )


# ════════════════════════════════════════════════════════════════════
#  Catalogue
# ════════════════════════════════════════════════════════════════════

@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display  = ("name", "gym", "duration_in_months", "price")
    list_filter   = ("gym",)
    search_fields = ("name",)


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display  = ("name", "gym", "schedule_time")
    list_filter   = ("gym",)
    search_fields = ("name",)


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display  = ("name", "gym", "price")
    list_filter   = ("gym",)


# ════════════════════════════════════════════════════════════════════
#  Members & Payments
# ════════════════════════════════════════════════════════════════════

class PaymentInline(admin.TabularInline):
    model           = Payment
    extra           = 0
    fields          = ("payment_date", "payment_kind", "total_amount", "amount_paid", "due_amount",
                       "payment_method")
    readonly_fields = ("due_amount",)


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display    = ("name", "gym", "phone", "plan", "plan_end_date", "status_badge")
    list_filter     = ("status", "gym", "plan")
    search_fields   = ("name", "phone", "email")
    readonly_fields = ("created_at", "updated_at")
    inlines         = [PaymentInline]
    list_per_page   = 30

    def status_badge(self, obj):
        color = "#28a745" if obj.status == Member.Status.ACTIVE else "#6c757d"
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 7px;border-radius:4px">{}</span>',
            color, obj.get_status_display(),
        )
    status_badge.short_description = _("status")

    def save_formset(self, request, form, formset, change):
        # inline payments take the member's gym
        for payment in formset.save(commit=False):
            payment.gym_id = form.instance.gym_id
            payment.save()
        for obj in formset.deleted_objects:
            obj.delete()


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display    = ("member", "gym", "payment_date", "payment_kind", "total_amount",
                       "amount_paid", "due_amount")
    list_filter     = ("payment_kind", "payment_method", "gym")
    search_fields   = ("member__name",)
    readonly_fields = ("due_amount", "created_at")
    date_hierarchy  = "payment_date"


@admin.register(MemberStatusLog)
class MemberStatusLogAdmin(admin.ModelAdmin):
    list_display  = ("member", "source", "reason", "old_status", "new_status",
                     "new_plan_end_date", "created_at")
    list_filter   = ("source", "reason", "gym")
    search_fields = ("member__name",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


# ════════════════════════════════════════════════════════════════════
#  Day-to-day
# ════════════════════════════════════════════════════════════════════

@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display   = ("member", "date", "status")
    list_filter    = ("status", "gym")
    date_hierarchy = "date"


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display  = ("name", "email", "gym", "role")
    list_filter   = ("role", "gym")
    search_fields = ("name", "email")


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display   = ("title", "gym", "amount", "date", "category")
    list_filter    = ("category", "gym")
    date_hierarchy = "date"


@admin.register(Enquiry)
class EnquiryAdmin(admin.ModelAdmin):
    list_display  = ("name", "phone", "gym", "status", "created_at")
    list_filter   = ("status", "gym")
    search_fields = ("name", "phone", "email")
