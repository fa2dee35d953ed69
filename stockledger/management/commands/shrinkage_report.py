"""
Management command to export registered shrinkage as CSV.

Usage:
    python manage.py shrinkage_report > mermas.csv
    python manage.py shrinkage_report --since 2024-01-01 --until 2024-01-31
    python manage.py shrinkage_report --classification extraordinary
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from stockledger import ledger
from stockledger.models import ShrinkageClassification


def _parse_date(value):
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise CommandError(f'Fecha inválida (use AAAA-MM-DD): {value}')


class Command(BaseCommand):
    """Shrinkage report command."""

    help = 'Exporta las mermas registradas en formato CSV'

    def add_arguments(self, parser):
        parser.add_argument('--since', help='Fecha inicial (AAAA-MM-DD)')
        parser.add_argument('--until', help='Fecha final (AAAA-MM-DD)')
        parser.add_argument(
            '--classification',
            choices=ShrinkageClassification.values,
            help='Solo mermas de esta clasificación'
        )

    def handle(self, *args, **options):
        since = _parse_date(options['since']) if options['since'] else None
        until = _parse_date(options['until']) if options['until'] else None

        rows = ledger.shrinkage_report(
            since=since,
            until=until,
            classification=options['classification'],
        )
        ledger.write_shrinkage_csv(rows, self.stdout)
