"""
Management command to re-derive every lot's status from its quantities.

Usage:
    python manage.py recompute_stock_status
    python manage.py recompute_stock_status --dry-run
"""

import logging

from django.core.management.base import BaseCommand
from django.db import transaction

from textileman.models import StockLot

logger = logging.getLogger('textileman')


class Command(BaseCommand):
    """Recompute stock status command."""

    help = 'Re-derive the status of every stock lot from its variant quantities'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would change without saving'
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        changed = 0

        with transaction.atomic():
            for lot in StockLot.objects.select_for_update().prefetch_related('variants'):
                before = lot.status
                after = lot.refresh_status([v.quantity for v in lot.variants.all()])
                if after == before:
                    continue
                changed += 1
                self.stdout.write(f'#{lot.pk} {lot.product}: {before} -> {after}')
                if not dry_run:
                    lot.save(update_fields=['status', 'updated_at'])

        if dry_run:
            self.stdout.write(f'{changed} lot(s) would change status')
        else:
            logger.info("stock.status.recomputed", extra={"changed": changed})
            self.stdout.write(
                self.style.SUCCESS(f'{changed} lot(s) changed status')
            )
