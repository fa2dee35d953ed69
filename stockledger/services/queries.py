"""
Stock queries — read-only operations.

All methods are classmethod on Ledger and use no locking. They never
write, so they are safe for dashboards and reports.
"""

from datetime import date, datetime, time
from decimal import Decimal

from django.conf import settings
from django.core.paginator import Paginator
from django.db.models import Count, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from stockledger.conf import stockledger_settings
from stockledger.exceptions import StockError
from stockledger.models.enums import MovementKind, StockLevel
from stockledger.models.movement import Movement
from stockledger.models.product import Product
from stockledger.services.thresholds import classify


def _as_datetime(value, end_of_day=False):
    """Accept date or datetime; dates cover the whole day."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        moment = datetime.combine(value, time.max if end_of_day else time.min)
        return timezone.make_aware(moment) if settings.USE_TZ else moment
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def get_product(cls, product) -> Product | None:
        """Get product by instance, sku or pk (a string is tried as sku first)."""
        if isinstance(product, Product):
            return product
        if isinstance(product, str):
            found = Product.objects.filter(sku=product).first()
            if found is not None or not product.isdigit():
                return found
        return Product.objects.filter(pk=product).first()

    @classmethod
    def quantity(cls, product) -> Decimal:
        """
        Quantity on hand, read fresh from the database.

        Raises:
            StockError('PRODUCT_NOT_FOUND'): No product with that pk
        """
        pk = getattr(product, 'pk', product)
        found = Product.objects.filter(pk=pk).values_list('_quantity', flat=True).first()
        if found is None:
            raise StockError('PRODUCT_NOT_FOUND', product_id=pk)
        return found

    @classmethod
    def level(cls, product) -> StockLevel:
        """Current StockLevel of a product."""
        found = cls.get_product(product)
        if found is None:
            raise StockError('PRODUCT_NOT_FOUND', product_id=product)
        return classify(found._quantity, found.min_quantity)

    # ══════════════════════════════════════════════════════════════
    # LEDGER
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def history(cls, product=None, kind: str | None = None, reason: str | None = None,
                since=None, until=None, user=None):
        """
        Movements, newest first.

        Args:
            product: Product instance or pk (None = all)
            kind: MovementKind value
            reason: Case-insensitive substring of the reason
            since/until: date or datetime bounds (inclusive)
            user: Only movements triggered by this user

        Returns:
            Movement QuerySet
        """
        qs = Movement.objects.select_related('product', 'user')

        if product is not None:
            qs = qs.filter(product_id=getattr(product, 'pk', product))

        if kind:
            if kind not in MovementKind.values:
                raise StockError('INVALID_KIND', kind=kind)
            qs = qs.filter(kind=kind)

        if reason:
            qs = qs.filter(reason__icontains=reason)

        if since is not None:
            qs = qs.filter(created_at__gte=_as_datetime(since))

        if until is not None:
            qs = qs.filter(created_at__lte=_as_datetime(until, end_of_day=True))

        if user is not None:
            qs = qs.filter(user=user)

        return qs.order_by('-created_at', '-id')

    @classmethod
    def paginate(cls, queryset, page: int = 1, page_size: int | None = None) -> dict:
        """
        Slice a queryset into one page.

        Returns:
            {'items', 'total', 'page', 'page_size', 'total_pages'}
        """
        page_size = page_size or stockledger_settings.HISTORY_PAGE_SIZE
        page_size = max(1, min(page_size, stockledger_settings.HISTORY_MAX_PAGE_SIZE))

        paginator = Paginator(queryset, page_size)
        current = paginator.get_page(page)

        return {
            'items': list(current.object_list),
            'total': paginator.count,
            'page': current.number,
            'page_size': page_size,
            'total_pages': paginator.num_pages,
        }

    @classmethod
    def net_change(cls, product, since=None, until=None) -> Decimal:
        """Sum of deltas for a product in a window."""
        return cls.history(product=product, since=since, until=until).aggregate(
            t=Coalesce(Sum('delta'), Decimal('0'))
        )['t']

    @classmethod
    def totals_by_kind(cls, **filters) -> dict[str, dict]:
        """
        Count and summed delta per movement kind.

        Accepts the same filters as history().
        """
        rows = cls.history(**filters).order_by().values('kind').annotate(
            count=Count('id'),
            total=Coalesce(Sum('delta'), Decimal('0')),
        )
        totals = {
            kind: {'count': 0, 'total': Decimal('0')}
            for kind in MovementKind.values
        }
        for row in rows:
            totals[row['kind']] = {'count': row['count'], 'total': row['total']}
        return totals

    # ══════════════════════════════════════════════════════════════
    # STOCK LEVELS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def products_below_minimum(cls, include_out_of_stock: bool = True):
        """Active products that need restocking."""
        qs = Product.objects.active()
        if include_out_of_stock:
            return qs.low()
        return qs.below_minimum()

    @classmethod
    def summary(cls) -> dict:
        """Inventory summary for dashboards."""
        active = Product.objects.active()
        return {
            'total_products': active.count(),
            'below_minimum': active.below_minimum().count(),
            'out_of_stock': active.out_of_stock().count(),
            'total_units': active.aggregate(
                t=Coalesce(Sum('_quantity'), Decimal('0'))
            )['t'],
        }
