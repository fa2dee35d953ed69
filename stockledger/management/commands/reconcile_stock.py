"""
Management command to check stored stock against the movement ledger.

Usage:
    python manage.py reconcile_stock
    python manage.py reconcile_stock --product PALTA-01
    python manage.py reconcile_stock --fix
"""

from django.core.management.base import BaseCommand, CommandError

from stockledger import ledger


class Command(BaseCommand):
    """Reconcile stock command."""

    help = 'Compara el stock guardado con el historial de movimientos'

    def add_arguments(self, parser):
        parser.add_argument(
            '--product',
            help='Código (SKU) o ID de un producto; por defecto todos'
        )
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Recalcula el stock desde los movimientos'
        )

    def handle(self, *args, **options):
        product = None
        if options['product']:
            product = ledger.get_product(options['product'])
            if product is None:
                raise CommandError(f"Producto no encontrado: {options['product']}")

        mismatches = ledger.reconcile(product, fix=options['fix'])

        if not mismatches:
            self.stdout.write(self.style.SUCCESS('Stock conciliado: sin diferencias'))
            return

        for item in mismatches:
            line = (
                f'{item.product.sku}: guardado {item.stored}, '
                f'movimientos {item.ledger} (diferencia {item.difference})'
            )
            if item.broken_links:
                line += f', movimientos inconsistentes: {item.broken_links}'
            if item.repaired:
                line += ' [corregido]'
            self.stdout.write(line)

        summary = f'{len(mismatches)} producto(s) con diferencias'
        if options['fix']:
            self.stdout.write(self.style.SUCCESS(summary))
        else:
            self.stdout.write(self.style.WARNING(summary))
