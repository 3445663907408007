"""
Management command to settle events whose result has been declared.
Run after admins set results, or periodically via cron as a catch-up.

Usage:
    python manage.py process_event_payouts
    python manage.py process_event_payouts --event 42 --dry-run
"""

from django.core.management.base import BaseCommand

from pools.models import Event, EventStatus
from pools.services.eventpool import process_payout
from pools.services.eventpool.errors import AlreadySettledError, PoolError


class Command(BaseCommand):
    help = 'Process payouts for active events that already have a declared result'

    def add_arguments(self, parser):
        parser.add_argument(
            '--event',
            type=int,
            default=None,
            help='Only settle this event id',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List events that would be settled without paying out',
        )

    def handle(self, *args, **options):
        qs = Event.objects.filter(
            status=EventStatus.ACTIVE, admin_result__isnull=False
        ).order_by('id')
        if options['event'] is not None:
            qs = qs.filter(pk=options['event'])

        event_ids = list(qs.values_list('id', flat=True))

        if options['dry_run']:
            self.stdout.write(
                self.style.WARNING(
                    f'DRY RUN: Would settle {len(event_ids)} events: {event_ids}'
                )
            )
            return

        settled = 0
        for event_id in event_ids:
            try:
                summary = process_payout(event_id)
            except AlreadySettledError:
                self.stdout.write(f'Event {event_id} already settled, skipping')
                continue
            except PoolError as e:
                self.stderr.write(self.style.ERROR(f'Event {event_id} failed: {e}'))
                continue
            settled += 1
            self.stdout.write(
                f'Event {event_id}: {summary["winners_count"]} winners, '
                f'total_payout={summary["total_payout"]}, creator_fee={summary["creator_fee"]}'
            )

        self.stdout.write(self.style.SUCCESS(f'Successfully settled {settled} events'))
