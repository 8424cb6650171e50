"""
gym_admin/management/commands/check_member_status.py
────────────────────────────────────────────────────────────────────
Runs the membership status reconciler from the command line.

Usage:
  python manage.py check_member_status --gym <uuid>
  python manage.py check_member_status --all                 # gyms with automation on
  python manage.py check_member_status --all --dry-run       # preview only
  python manage.py check_member_status --gym <uuid> --date 2024-02-15

Cron (when Celery beat is not running):
  0 0 * * * cd /path/project && python manage.py check_member_status --all
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from gym_admin.exceptions import TenantRequiredError, TenantSweepError
from gym_admin.models import Gym
from gym_admin.services.dates import parse_date
from gym_admin.services.membership_service import reconcile_gym

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Deactivate, extend or reactivate memberships according to payments"

    def add_arguments(self, parser):
        target = parser.add_mutually_exclusive_group(required=True)
        target.add_argument("--gym", help="id of a single gym (checked even if automation is off)")
        target.add_argument("--all", action="store_true",
                            help="every gym with automatic member checks enabled")
        parser.add_argument("--dry-run", action="store_true", help="report changes without saving")
        parser.add_argument("--date", help="evaluate as of this date (YYYY-MM-DD)")

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        today = None
        if options["date"]:
            try:
                today = parse_date(options["date"], "date")
            except ValueError as e:
                raise CommandError(str(e))

        if options["all"]:
            gym_ids = list(Gym.objects.filter(auto_inactive_members=True).values_list("pk", flat=True))
        else:
            gym_ids = [options["gym"]]

        if not gym_ids:
            self.stdout.write(self.style.WARNING("No gyms with automatic member checks enabled."))
            return

        self.stdout.write(self.style.WARNING(
            f"\n{'[DRY-RUN] ' if dry_run else ''}Member status check for {len(gym_ids)} gym(s)\n"
            f"{'─' * 50}"
        ))

        total_checked = 0
        total_updated = 0
        failed_gyms   = 0

        for gym_id in gym_ids:
            try:
                result = reconcile_gym(gym_id, today=today, dry_run=dry_run)
            except TenantRequiredError as e:
                raise CommandError(f"Invalid gym id: {e}")
            except TenantSweepError as e:
                failed_gyms += 1
                logger.error("[reconcile] %s", e)
                self.stdout.write(self.style.ERROR(f"  ✗ {gym_id}: {e.cause}"))
                continue

            total_checked += result.total_checked
            total_updated += result.total_updated
            self.stdout.write(
                f"  {gym_id}  checked {result.total_checked}, updated {result.total_updated}"
                + ("  (timed out)" if result.timed_out else "")
            )
            for change in result.updated_members:
                line = f"      {change.name} (#{change.id}) → {change.new_status}: {change.to_dict()['reason']}"
                if change.new_plan_end_date:
                    line += f", plan ends {change.new_plan_end_date.isoformat()}"
                self.stdout.write(line)
            for failure in result.failed_members:
                self.stdout.write(self.style.ERROR(f"      member #{failure['id']}: {failure['error']}"))

        summary = f"\nChecked: {total_checked}   Updated: {total_updated}"
        if failed_gyms:
            self.stdout.write(self.style.ERROR(f"{summary}   Failed gyms: {failed_gyms}"))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
