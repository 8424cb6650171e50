import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import gym_admin.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="Gym",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255, verbose_name="gym name")),
                ("country", models.CharField(blank=True, max_length=100, verbose_name="country")),
                ("auto_inactive_members", models.BooleanField(default=True, help_text="Include this gym in the nightly membership status sweep.", verbose_name="automatic status check")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={"verbose_name": "gym", "verbose_name_plural": "gyms", "ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="CustomUser",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="email")),
                ("name", models.CharField(blank=True, max_length=255, verbose_name="name")),
                ("phone", models.CharField(blank=True, max_length=20, verbose_name="phone")),
                ("role", models.CharField(choices=[("admin", "Admin"), ("staff", "Staff"), ("trainer", "Trainer")], default="staff", max_length=10, verbose_name="role")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("is_staff", models.BooleanField(default=False, verbose_name="admin site access")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("gym", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="users", to="gym_admin.gym", verbose_name="gym")),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={"verbose_name": "user", "verbose_name_plural": "users"},
        ),
        migrations.CreateModel(
            name="Plan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("duration_in_months", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name="duration (months)")),
                ("price", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)], verbose_name="price")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="plans", to="gym_admin.gym", verbose_name="gym")),
            ],
            options={"verbose_name": "plan", "verbose_name_plural": "plans", "ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Batch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("schedule_time", models.CharField(blank=True, max_length=100, verbose_name="schedule")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="batches", to="gym_admin.gym", verbose_name="gym")),
            ],
            options={"verbose_name": "batch", "verbose_name_plural": "batches", "ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Service",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("price", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)], verbose_name="price")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="services", to="gym_admin.gym", verbose_name="gym")),
            ],
            options={"verbose_name": "service", "verbose_name_plural": "services", "ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Member",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("phone", models.CharField(max_length=20, verbose_name="phone")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                ("dob", models.DateField(blank=True, null=True, verbose_name="date of birth")),
                ("gender", models.CharField(blank=True, choices=[("male", "Male"), ("female", "Female"), ("other", "Other")], max_length=10, verbose_name="gender")),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive")], default="active", max_length=10, verbose_name="status")),
                ("join_date", models.DateField(default=django.utils.timezone.localdate, verbose_name="join date")),
                ("plan_end_date", models.DateField(blank=True, null=True, verbose_name="plan end date")),
                ("discount_value", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="discount")),
                ("admission_fees", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="admission fees")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="members", to="gym_admin.gym", verbose_name="gym")),
                ("plan", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="members", to="gym_admin.plan", verbose_name="plan")),
                ("batch", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="members", to="gym_admin.batch", verbose_name="batch")),
            ],
            options={
                "verbose_name": "member",
                "verbose_name_plural": "members",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["gym", "status"], name="member_gym_status_idx"),
                    models.Index(fields=["gym", "plan_end_date"], name="member_gym_plan_end_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount_paid", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)], verbose_name="amount paid")),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)], verbose_name="total amount")),
                ("due_amount", models.DecimalField(decimal_places=2, default=0, editable=False, max_digits=12, verbose_name="due amount")),
                ("payment_date", models.DateField(default=django.utils.timezone.localdate, verbose_name="payment date")),
                ("payment_method", models.CharField(choices=[("cash", "Cash"), ("card", "Card"), ("upi", "UPI"), ("bank_transfer", "Bank transfer"), ("online", "Online"), ("other", "Other")], default="cash", max_length=20, verbose_name="method")),
                ("payment_kind", models.CharField(choices=[("admission_fee", "Admission fee"), ("plan_renewal", "Plan payment"), ("other", "Other")], default="plan_renewal", max_length=20, verbose_name="kind")),
                ("notes", models.TextField(blank=True, verbose_name="notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="payments", to="gym_admin.gym", verbose_name="gym")),
                ("member", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="payments", to="gym_admin.member", verbose_name="member")),
            ],
            options={
                "verbose_name": "payment",
                "verbose_name_plural": "payments",
                "ordering": ["-payment_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["member", "payment_date"], name="payment_member_date_idx"),
                    models.Index(fields=["gym", "payment_date"], name="payment_gym_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Attendance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(verbose_name="date")),
                ("status", models.CharField(choices=[("present", "Present"), ("absent", "Absent")], default="present", max_length=10, verbose_name="status")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="attendance", to="gym_admin.gym", verbose_name="gym")),
                ("member", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="attendance", to="gym_admin.member", verbose_name="member")),
            ],
            options={
                "verbose_name": "attendance",
                "verbose_name_plural": "attendance",
                "ordering": ["-date"],
                "unique_together": {("member", "date")},
            },
        ),
        migrations.CreateModel(
            name="Staff",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("email", models.EmailField(max_length=254, verbose_name="email")),
                ("phone", models.CharField(blank=True, max_length=20, verbose_name="phone")),
                ("role", models.CharField(choices=[("admin", "Admin"), ("staff", "Staff"), ("trainer", "Trainer")], default="staff", max_length=10, verbose_name="role")),
                ("permissions", models.JSONField(default=gym_admin.models.default_staff_permissions, verbose_name="permissions")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="staff", to="gym_admin.gym", verbose_name="gym")),
                ("user", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="staff_profile", to=settings.AUTH_USER_MODEL, verbose_name="account")),
            ],
            options={
                "verbose_name": "staff member",
                "verbose_name_plural": "staff",
                "ordering": ["name"],
                "unique_together": {("gym", "email")},
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255, verbose_name="title")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)], verbose_name="amount")),
                ("date", models.DateField(default=django.utils.timezone.localdate, verbose_name="date")),
                ("category", models.CharField(blank=True, max_length=100, verbose_name="category")),
                ("notes", models.TextField(blank=True, verbose_name="notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="expenses", to="gym_admin.gym", verbose_name="gym")),
            ],
            options={"verbose_name": "expense", "verbose_name_plural": "expenses", "ordering": ["-date"]},
        ),
        migrations.CreateModel(
            name="Enquiry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("phone", models.CharField(max_length=20, verbose_name="phone")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                ("message", models.TextField(blank=True, verbose_name="message")),
                ("status", models.CharField(choices=[("open", "Open"), ("closed", "Closed")], default="open", max_length=10, verbose_name="status")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="enquiries", to="gym_admin.gym", verbose_name="gym")),
            ],
            options={"verbose_name": "enquiry", "verbose_name_plural": "enquiries", "ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="MemberStatusLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("source", models.CharField(choices=[("reconciler", "Status check"), ("admin", "Manual edit")], max_length=20, verbose_name="source")),
                ("reason", models.CharField(blank=True, max_length=50, verbose_name="reason")),
                ("old_status", models.CharField(blank=True, max_length=10, verbose_name="old status")),
                ("new_status", models.CharField(max_length=10, verbose_name="new status")),
                ("old_plan_end_date", models.DateField(blank=True, null=True, verbose_name="old plan end date")),
                ("new_plan_end_date", models.DateField(blank=True, null=True, verbose_name="new plan end date")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="time")),
                ("gym", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="status_logs", to="gym_admin.gym", verbose_name="gym")),
                ("member", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="status_logs", to="gym_admin.member", verbose_name="member")),
            ],
            options={"verbose_name": "member status change", "verbose_name_plural": "member status changes", "ordering": ["-created_at"]},
        ),
    ]
