"""
Management command to purge expired reservations.

Expired reservations already stop counting the moment their TTL lapses;
this only keeps the table small.

Usage:
    python manage.py purge_expired_reservations
    python manage.py purge_expired_reservations --dry-run
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from rackman import storage
from rackman.models import Reservation


class Command(BaseCommand):
    """Purge expired reservations command."""

    help = 'Deletes reservations whose TTL has lapsed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many would be deleted without deleting'
        )

    def handle(self, *args, **options):
        now = timezone.now()
        if options['dry_run']:
            expired = Reservation.objects.expired(now).count()
            self.stdout.write(f'{expired} expired reservation(s) would be purged')
        else:
            count = storage.purge_expired_reservations(now)
            self.stdout.write(
                self.style.SUCCESS(f'{count} expired reservation(s) purged')
            )
