# iex-app/iexproxy/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin site URL
    path('admin/', admin.site.urls),

    # Include the IEX proxy endpoints from the 'market_data' app
    path('iex/', include('market_data.api_urls')),
]
