"""
Django management command to retry undispatched order events.
Run it periodically (cron, systemd timer) to cover events whose
post-commit dispatch failed or never ran.
"""
from django.core.management.base import BaseCommand

from orders.events import dispatch_pending_events
from orders.models import OutboxEvent
from orders.module import DISPATCH_BATCH_SIZE


class Command(BaseCommand):
    help = 'Dispatch pending order events from the outbox'

    def add_arguments(self, parser):
        parser.add_argument(
            '--limit',
            type=int,
            default=DISPATCH_BATCH_SIZE,
            help='Maximum number of events to dispatch in this run',
        )

    def handle(self, *args, **options):
        sent = dispatch_pending_events(limit=options['limit'])
        remaining = OutboxEvent.objects.filter(dispatched_at__isnull=True).count()

        self.stdout.write(self.style.SUCCESS(f'Dispatched {sent} events'))
        if remaining:
            self.stdout.write(self.style.WARNING(f'{remaining} events still pending'))
