"""
URL configuration for the PrimeGestor project.

Every app exposes its endpoints under /api/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "PrimeGestor Admin Panel"
admin.site.site_title = "PrimeGestor Admin Portal"
admin.site.index_title = "Welcome to PrimeGestor"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('primegestor.core.urls')),
    path('api/', include('primegestor.locations.urls')),
    path('api/', include('primegestor.parties.urls')),
    path('api/', include('primegestor.catalog.urls')),
    path('api/', include('primegestor.inventory.urls')),
    path('api/', include('primegestor.purchasing.urls')),
    path('api/', include('primegestor.sales.urls')),
    path('api/', include('primegestor.reports.urls')),
]
