import logging
from django.db import models

logger = logging.getLogger(__name__)


class HistoricalPriceQuerySet(models.QuerySet):
    """
    Store operations used by the market data service.

    Dates may be passed either as `datetime.date` objects or as canonical
    'YYYY-MM-DD' strings; the DateField lookups accept both.
    """
    def exists_by_symbol_and_date(self, symbol, date):
        return self.filter(symbol=symbol, date=date).exists()

    def find_by_symbol_and_date(self, symbol, date):
        return list(self.filter(symbol=symbol, date=date))

    def find_by_symbol_and_date_gte(self, symbol, date):
        return list(self.filter(symbol=symbol, date__gte=date).order_by('date'))

    def save_all(self, records):
        """
        Inserts the given records, skipping any (symbol, date) pair already stored.

        Existing rows are left untouched, so saving the same day twice never
        produces a second row.

        Args:
            records (list[HistoricalPrice]): Unsaved model instances.

        Returns:
            list[HistoricalPrice]: The records that were handed to the database.
        """
        if not records:
            return []
        saved = self.bulk_create(records, ignore_conflicts=True)
        logger.debug(f"bulk_create submitted {len(saved)} historical price rows.")
        return saved

    def delete_all(self):
        deleted, _ = self.all().delete()
        return deleted


class HistoricalPrice(models.Model):
    """
    A single day of OHLCV data for one symbol, as returned by the IEX chart endpoint.

    The auto primary key is bookkeeping only; a row is identified by
    (symbol, date) and there is never more than one row per pair.
    """
    symbol = models.CharField(max_length=20, db_index=True, help_text="The stock symbol (ticker).")
    date = models.DateField(db_index=True, help_text="The trading day.")
    open = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True, help_text="Opening price.")
    low = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True, help_text="Lowest price.")
    high = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True, help_text="Highest price.")
    close = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True, help_text="Closing price.")
    volume = models.BigIntegerField(null=True, blank=True, help_text="Shares traded.")

    objects = HistoricalPriceQuerySet.as_manager()

    class Meta:
        verbose_name = "Historical price"
        verbose_name_plural = "Historical prices"
        unique_together = ('symbol', 'date')
        ordering = ['symbol', 'date']

    def __str__(self):
        return f"{self.symbol} - {self.date}"
