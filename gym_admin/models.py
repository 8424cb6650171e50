"""
Multi-tenant gym administration
models.py - every business row carries the owning gym (tenant key)
"""

import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MinValueValidator
from django.utils.translation import gettext_lazy as _
from django.utils import timezone


# ─────────────────────────────────────────────
#  Role Choices
# ─────────────────────────────────────────────
class Role(models.TextChoices):
    ADMIN   = 'admin',   _('Admin')
    STAFF   = 'staff',   _('Staff')
    TRAINER = 'trainer', _('Trainer')


def default_staff_permissions():
    return {'add': False, 'edit': False, 'delete': False}


# ─────────────────────────────────────────────
#  Tenant
# ─────────────────────────────────────────────
class Gym(models.Model):
    """
    Tenant root. The id equals the identity-provider id of the admin
    who registered the gym.
    """
    id                    = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name                  = models.CharField(_('gym name'), max_length=255)
    country               = models.CharField(_('country'), max_length=100, blank=True)
    auto_inactive_members = models.BooleanField(
        _('automatic status check'), default=True,
        help_text=_('Include this gym in the nightly membership status sweep.')
    )
    created_at            = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name        = _('gym')
        verbose_name_plural = _('gyms')
        ordering            = ['name']

    def __str__(self):
        return self.name


# ─────────────────────────────────────────────
#  Custom User Manager
# ─────────────────────────────────────────────
class CustomUserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError(_('Email is required.'))
        user = self.model(email=self.normalize_email(email), **extra_fields)
        # passwords live at the identity provider unless one is given here
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', Role.ADMIN)
        return self.create_user(email, password, **extra_fields)


# ─────────────────────────────────────────────
#  Custom User (gym profile)
# ─────────────────────────────────────────────
class CustomUser(AbstractBaseUser, PermissionsMixin):
    """
    Local profile of an identity-provider account. `id` mirrors the
    provider's user id; `gym` is the tenant every request is scoped to.
    """
    id          = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email       = models.EmailField(_('email'), unique=True)
    name        = models.CharField(_('name'), max_length=255, blank=True)
    phone       = models.CharField(_('phone'), max_length=20, blank=True)
    role        = models.CharField(_('role'), max_length=10, choices=Role.choices, default=Role.STAFF)
    gym         = models.ForeignKey(
        Gym, on_delete=models.CASCADE, null=True, blank=True,
        related_name='users', verbose_name=_('gym')
    )

    is_active   = models.BooleanField(_('active'), default=True)
    is_staff    = models.BooleanField(_('admin site access'), default=False)
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)

    objects = CustomUserManager()

    USERNAME_FIELD  = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        verbose_name        = _('user')
        verbose_name_plural = _('users')

    def __str__(self):
        return f'{self.name or self.email} ({self.role})'

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(' ')[0] if self.name else self.email

    def has_role(self, *roles: str) -> bool:
        return self.role in roles


# ─────────────────────────────────────────────
#  Catalogue: plans, batches, services
# ─────────────────────────────────────────────
class Plan(models.Model):
    """
    Membership plan. Editing a plan never touches the plan_end_date of
    members already on it.
    """
    gym                = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='plans', verbose_name=_('gym'))
    name               = models.CharField(_('name'), max_length=255)
    duration_in_months = models.PositiveSmallIntegerField(_('duration (months)'), validators=[MinValueValidator(1)])
    price              = models.DecimalField(_('price'), max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    description        = models.TextField(_('description'), blank=True)
    created_at         = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name        = _('plan')
        verbose_name_plural = _('plans')
        ordering            = ['name']

    def __str__(self):
        return f'{self.name} ({self.duration_in_months} mo)'


class Batch(models.Model):
    """Training batch (time slot) members can be assigned to."""
    gym           = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='batches', verbose_name=_('gym'))
    name          = models.CharField(_('name'), max_length=255)
    schedule_time = models.CharField(_('schedule'), max_length=100, blank=True)
    created_at    = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name        = _('batch')
        verbose_name_plural = _('batches')
        ordering            = ['name']

    def __str__(self):
        return self.name


class Service(models.Model):
    """Add-on service sold by the gym (personal training, locker, ...)."""
    gym         = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='services', verbose_name=_('gym'))
    name        = models.CharField(_('name'), max_length=255)
    description = models.TextField(_('description'), blank=True)
    price       = models.DecimalField(_('price'), max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    created_at  = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name        = _('service')
        verbose_name_plural = _('services')
        ordering            = ['name']

    def __str__(self):
        return self.name


# ─────────────────────────────────────────────
#  Member
# ─────────────────────────────────────────────
class Member(models.Model):
    """
    Gym member. plan_end_date is derived from join_date and the plan
    duration at creation; afterwards only renewals and the status
    reconciler move it.
    """

    class Gender(models.TextChoices):
        MALE   = 'male',   _('Male')
        FEMALE = 'female', _('Female')
        OTHER  = 'other',  _('Other')

    class Status(models.TextChoices):
        ACTIVE   = 'active',   _('Active')
        INACTIVE = 'inactive', _('Inactive')

    gym            = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='members', verbose_name=_('gym'))
    name           = models.CharField(_('name'), max_length=255)
    phone          = models.CharField(_('phone'), max_length=20)
    email          = models.EmailField(_('email'), blank=True)
    dob            = models.DateField(_('date of birth'), null=True, blank=True)
    gender         = models.CharField(_('gender'), max_length=10, choices=Gender.choices, blank=True)
    status         = models.CharField(_('status'), max_length=10, choices=Status.choices, default=Status.ACTIVE)
    plan           = models.ForeignKey(
        Plan, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='members', verbose_name=_('plan')
    )
    batch          = models.ForeignKey(
        Batch, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='members', verbose_name=_('batch')
    )
    join_date      = models.DateField(_('join date'), default=timezone.localdate)
    plan_end_date  = models.DateField(_('plan end date'), null=True, blank=True)
    discount_value = models.DecimalField(_('discount'), max_digits=12, decimal_places=2, default=0)
    admission_fees = models.DecimalField(_('admission fees'), max_digits=12, decimal_places=2, default=0)
    created_at     = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at     = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name        = _('member')
        verbose_name_plural = _('members')
        ordering            = ['-created_at']
        indexes             = [
            models.Index(fields=['gym', 'status'], name='member_gym_status_idx'),
            models.Index(fields=['gym', 'plan_end_date'], name='member_gym_plan_end_idx'),
        ]

    def __str__(self):
        return f'{self.name} ({self.get_status_display()})'

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE


# ─────────────────────────────────────────────
#  Payments
# ─────────────────────────────────────────────
class Payment(models.Model):
    """
    One payment against a member. due_amount is never trusted from the
    caller; it is recomputed from total and paid on every save.
    """

    class Method(models.TextChoices):
        CASH          = 'cash',          _('Cash')
        CARD          = 'card',          _('Card')
        UPI           = 'upi',           _('UPI')
        BANK_TRANSFER = 'bank_transfer', _('Bank transfer')
        ONLINE        = 'online',        _('Online')
        OTHER         = 'other',         _('Other')

    class Kind(models.TextChoices):
        ADMISSION_FEE = 'admission_fee', _('Admission fee')
        PLAN_RENEWAL  = 'plan_renewal',  _('Plan payment')
        OTHER         = 'other',         _('Other')

    gym            = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='payments', verbose_name=_('gym'))
    member         = models.ForeignKey(Member, on_delete=models.CASCADE, related_name='payments', verbose_name=_('member'))
    amount_paid    = models.DecimalField(_('amount paid'), max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    total_amount   = models.DecimalField(_('total amount'), max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    due_amount     = models.DecimalField(_('due amount'), max_digits=12, decimal_places=2, default=0, editable=False)
    payment_date   = models.DateField(_('payment date'), default=timezone.localdate)
    payment_method = models.CharField(_('method'), max_length=20, choices=Method.choices, default=Method.CASH)
    payment_kind   = models.CharField(_('kind'), max_length=20, choices=Kind.choices, default=Kind.PLAN_RENEWAL)
    notes          = models.TextField(_('notes'), blank=True)
    created_at     = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name        = _('payment')
        verbose_name_plural = _('payments')
        ordering            = ['-payment_date', '-created_at']
        indexes             = [
            models.Index(fields=['member', 'payment_date'], name='payment_member_date_idx'),
            models.Index(fields=['gym', 'payment_date'], name='payment_gym_date_idx'),
        ]

    def __str__(self):
        return f'{self.member} — {self.amount_paid}/{self.total_amount} ({self.payment_date})'

    def save(self, *args, **kwargs):
        from .services.payment_service import compute_due_amount
        self.due_amount = compute_due_amount(self.total_amount, self.amount_paid)
        super().save(*args, **kwargs)

    @property
    def is_settled(self) -> bool:
        return self.due_amount == 0


# ─────────────────────────────────────────────
#  Attendance
# ─────────────────────────────────────────────
class Attendance(models.Model):
    """One attendance mark per member per day."""

    class Status(models.TextChoices):
        PRESENT = 'present', _('Present')
        ABSENT  = 'absent',  _('Absent')

    gym        = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='attendance', verbose_name=_('gym'))
    member     = models.ForeignKey(Member, on_delete=models.CASCADE, related_name='attendance', verbose_name=_('member'))
    date       = models.DateField(_('date'))
    status     = models.CharField(_('status'), max_length=10, choices=Status.choices, default=Status.PRESENT)
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name        = _('attendance')
        verbose_name_plural = _('attendance')
        unique_together     = ('member', 'date')
        ordering            = ['-date']

    def __str__(self):
        return f'{self.member} — {self.date}: {self.get_status_display()}'


# ─────────────────────────────────────────────
#  Staff
# ─────────────────────────────────────────────
class Staff(models.Model):
    """Staff roster entry; `user` links the login account when provisioned."""
    gym         = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='staff', verbose_name=_('gym'))
    user        = models.OneToOneField(
        CustomUser, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='staff_profile', verbose_name=_('account')
    )
    name        = models.CharField(_('name'), max_length=255)
    email       = models.EmailField(_('email'))
    phone       = models.CharField(_('phone'), max_length=20, blank=True)
    role        = models.CharField(_('role'), max_length=10, choices=Role.choices, default=Role.STAFF)
    permissions = models.JSONField(_('permissions'), default=default_staff_permissions)
    created_at  = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name        = _('staff member')
        verbose_name_plural = _('staff')
        ordering            = ['name']
        unique_together     = ('gym', 'email')

    def __str__(self):
        return f'{self.name} ({self.get_role_display()})'


# ─────────────────────────────────────────────
#  Expenses & Enquiries
# ─────────────────────────────────────────────
class Expense(models.Model):
    gym        = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='expenses', verbose_name=_('gym'))
    title      = models.CharField(_('title'), max_length=255)
    amount     = models.DecimalField(_('amount'), max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    date       = models.DateField(_('date'), default=timezone.localdate)
    category   = models.CharField(_('category'), max_length=100, blank=True)
    notes      = models.TextField(_('notes'), blank=True)
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name        = _('expense')
        verbose_name_plural = _('expenses')
        ordering            = ['-date']

    def __str__(self):
        return f'{self.title} — {self.amount} ({self.date})'


class Enquiry(models.Model):
    """Walk-in or phone enquiry from a prospective member."""

    class Status(models.TextChoices):
        OPEN   = 'open',   _('Open')
        CLOSED = 'closed', _('Closed')

    gym        = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='enquiries', verbose_name=_('gym'))
    name       = models.CharField(_('name'), max_length=255)
    phone      = models.CharField(_('phone'), max_length=20)
    email      = models.EmailField(_('email'), blank=True)
    message    = models.TextField(_('message'), blank=True)
    status     = models.CharField(_('status'), max_length=10, choices=Status.choices, default=Status.OPEN)
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name        = _('enquiry')
        verbose_name_plural = _('enquiries')
        ordering            = ['-created_at']

    def __str__(self):
        return f'{self.name} ({self.get_status_display()})'


# ─────────────────────────────────────────────
#  Audit trail
# ─────────────────────────────────────────────
class MemberStatusLog(models.Model):
    """
    Every change to a member's status or plan_end_date made by the
    reconciler or by an admin edit.
    """

    class Source(models.TextChoices):
        RECONCILER = 'reconciler', _('Status check')
        ADMIN      = 'admin',      _('Manual edit')

    gym               = models.ForeignKey(Gym, on_delete=models.CASCADE, related_name='status_logs', verbose_name=_('gym'))
    member            = models.ForeignKey(Member, on_delete=models.CASCADE, related_name='status_logs', verbose_name=_('member'))
    source            = models.CharField(_('source'), max_length=20, choices=Source.choices)
    reason            = models.CharField(_('reason'), max_length=50, blank=True)
    old_status        = models.CharField(_('old status'), max_length=10, blank=True)
    new_status        = models.CharField(_('new status'), max_length=10)
    old_plan_end_date = models.DateField(_('old plan end date'), null=True, blank=True)
    new_plan_end_date = models.DateField(_('new plan end date'), null=True, blank=True)
    created_at        = models.DateTimeField(_('time'), auto_now_add=True)

    class Meta:
        verbose_name        = _('member status change')
        verbose_name_plural = _('member status changes')
        ordering            = ['-created_at']

    def __str__(self):
        return f'{self.member} — {self.old_status} → {self.new_status} ({self.reason})'
