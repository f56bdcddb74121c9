from django.core.management.base import BaseCommand
from django.contrib.sessions.models import Session
from django.utils import timezone
from django.db import transaction
import datetime
import logging

from core.models import LoginSession

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Delete long-expired sessions and close login records whose session is gone'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=7,
            help='Delete sessions that expired more than this many days ago (default: 7)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report what would change without writing anything',
        )

    def handle(self, *args, **options):
        days = options['days']
        dry_run = options['dry_run']

        now = timezone.now()
        cutoff_date = now - datetime.timedelta(days=days)

        self.stdout.write(f"Looking for sessions that expired before {cutoff_date}")

        expired_sessions = Session.objects.filter(expire_date__lt=cutoff_date)
        live_keys = Session.objects.filter(expire_date__gte=now).values_list('session_key', flat=True)
        orphaned_records = LoginSession.objects.active().exclude(session_key__in=live_keys)

        session_count = expired_sessions.count()
        record_count = orphaned_records.count()

        if dry_run:
            self.stdout.write(
                self.style.WARNING(
                    f"DRY RUN: Would delete {session_count} sessions "
                    f"and close {record_count} login records"
                )
            )
            return

        with transaction.atomic():
            closed = orphaned_records.update(is_active=False, logout_at=now)
            deleted_count, _ = expired_sessions.delete()

        logger.info(
            f"Session cleanup: deleted {deleted_count} sessions older than {days} days, "
            f"closed {closed} login records"
        )

        self.stdout.write(
            self.style.SUCCESS(f"Deleted {deleted_count} expired sessions and closed {closed} login records")
        )
