# iex-app/market_data/admin.py
from django.contrib import admin
from .models import HistoricalPrice


@admin.register(HistoricalPrice)
class HistoricalPriceAdmin(admin.ModelAdmin):
    """
    Admin interface customization for the HistoricalPrice model.
    """
    list_display = ('symbol', 'date', 'open', 'high', 'low', 'close', 'formatted_volume')
    list_filter = ('symbol',)
    search_fields = ('symbol',)
    date_hierarchy = 'date'
    ordering = ('symbol', '-date')

    def formatted_volume(self, obj):
        """Formats the volume with commas for readability."""
        if obj.volume is None:
            return "—"
        return f"{obj.volume:,}"
    formatted_volume.short_description = 'Volume'
    formatted_volume.admin_order_field = 'volume'
