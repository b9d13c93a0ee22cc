"""
URL configuration for the Athena warehouse backend.

Every app mounts its routes under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Athena Gudang Sparepart Admin Panel"
admin.site.site_title = "Athena Admin Portal"
admin.site.index_title = "Welcome to the Spare-Parts Warehouse Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('athena.core.urls')),
    path('api/v1/', include('athena.inventory.urls')),
    path('api/v1/', include('athena.movements.urls')),
    path('api/v1/', include('athena.registers.urls')),
    path('api/v1/', include('athena.reports.urls')),
]
