from datetime import date
from decimal import Decimal
from django.test import TestCase
from market_data.models import HistoricalPrice


def make_price(symbol, day, close='100.00', volume=1000):
    return HistoricalPrice(
        symbol=symbol, date=day,
        open=Decimal(close), low=Decimal(close), high=Decimal(close), close=Decimal(close),
        volume=volume,
    )


class HistoricalPriceStoreTest(TestCase):
    def setUp(self):
        HistoricalPrice.objects.save_all([
            make_price('FB', date(2021, 10, 18), close='335.34'),
            make_price('FB', date(2021, 10, 20), close='340.78'),
            make_price('FB', date(2021, 10, 19), close='341.13'),
            make_price('AAPL', date(2021, 10, 18), close='146.55'),
        ])

    def test_exists_by_symbol_and_date_accepts_canonical_strings(self):
        self.assertTrue(HistoricalPrice.objects.exists_by_symbol_and_date('FB', '2021-10-18'))
        self.assertTrue(HistoricalPrice.objects.exists_by_symbol_and_date('FB', date(2021, 10, 19)))
        self.assertFalse(HistoricalPrice.objects.exists_by_symbol_and_date('FB', '2021-10-21'))
        self.assertFalse(HistoricalPrice.objects.exists_by_symbol_and_date('MSFT', '2021-10-18'))

    def test_find_by_symbol_and_date(self):
        found = HistoricalPrice.objects.find_by_symbol_and_date('FB', '2021-10-18')
        self.assertEqual(len(found), 1)
        self.assertEqual(found[0].close, Decimal('335.34'))

    def test_find_by_symbol_and_date_gte_is_date_ordered(self):
        found = HistoricalPrice.objects.find_by_symbol_and_date_gte('FB', date(2021, 10, 19))
        self.assertEqual([p.date for p in found], [date(2021, 10, 19), date(2021, 10, 20)])

    def test_save_all_is_idempotent_per_symbol_and_date(self):
        """Saving a day that is already stored must not create a second row or change the first."""
        HistoricalPrice.objects.save_all([
            make_price('FB', date(2021, 10, 18), close='999.99'),
            make_price('FB', date(2021, 10, 21), close='324.61'),
        ])

        self.assertEqual(HistoricalPrice.objects.filter(symbol='FB', date=date(2021, 10, 18)).count(), 1)
        self.assertEqual(HistoricalPrice.objects.get(symbol='FB', date=date(2021, 10, 18)).close, Decimal('335.34'))
        self.assertEqual(HistoricalPrice.objects.filter(symbol='FB').count(), 4)

    def test_save_all_with_nothing_to_save(self):
        self.assertEqual(HistoricalPrice.objects.save_all([]), [])

    def test_delete_all(self):
        self.assertEqual(HistoricalPrice.objects.delete_all(), 4)
        self.assertFalse(HistoricalPrice.objects.exists())

    def test_str(self):
        self.assertEqual(str(make_price('FB', date(2021, 10, 18))), "FB - 2021-10-18")
