"""
Management command to report low/out lots and send the low-stock summary.

Usage:
    python manage.py check_stock_alerts
    python manage.py check_stock_alerts --dry-run
"""

from django.core.management.base import BaseCommand

from textileman.services.alerts import notify_stock_alerts, stock_alerts


class Command(BaseCommand):
    """Check stock alerts command."""

    help = 'Report lots that are low or out of stock and send the summary notification'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List alerts without sending a notification'
        )

    def handle(self, *args, **options):
        alerts = stock_alerts()
        critical = sum(1 for a in alerts if a['severity'] == 'critical')
        self.stdout.write(f'{len(alerts)} alert(s), {critical} critical')

        if options['dry_run'] or not alerts:
            return

        entry = notify_stock_alerts(alerts)
        if entry is None:
            self.stdout.write('Low stock warnings are disabled; nothing sent')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'Summary {entry.status} to {entry.sent_to_count} recipient(s)')
            )
