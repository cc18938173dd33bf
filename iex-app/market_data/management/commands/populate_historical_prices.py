from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from market_data.tasks import warm_historical_prices


class Command(BaseCommand):
    help = 'Populates the historical price store from IEX for the given symbols.'

    def add_arguments(self, parser):
        parser.add_argument('--symbols', nargs='+', type=str, help='Symbols to fetch. Defaults to IEX_WARM_SYMBOLS.')
        parser.add_argument('--range', dest='range_expr', type=str, default=None, help="IEX range to fetch, e.g. '5d', '1m', '2y' (default: IEX_DEFAULT_RANGE).")
        parser.add_argument('--date', type=str, default=None, help='A single day to fetch, YYYYMMDD. Takes precedence over --range.')

    def handle(self, *args, **options):
        symbols = options['symbols'] or settings.IEX_WARM_SYMBOLS
        if not symbols:
            raise CommandError("No symbols given and IEX_WARM_SYMBOLS is empty.")

        self.stdout.write(f"Fetching historical prices for {len(symbols)} symbols...")
        results = warm_historical_prices(symbols, options['range_expr'], options['date'])

        for symbol, count in results.items():
            if count is None:
                self.stdout.write(self.style.ERROR(f"Failed to populate historical prices for {symbol}."))
            elif count == 0:
                self.stdout.write(self.style.WARNING(f"No data returned for {symbol}."))
            else:
                self.stdout.write(self.style.SUCCESS(f"Populated {count} records for {symbol}."))

        self.stdout.write(self.style.SUCCESS("Historical price population complete."))
