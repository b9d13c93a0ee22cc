from django.urls import path
from .views import (
    inventory_list, inventory_detail, inventory_lookup, inventory_delete_all,
    inventory_import, inventory_export,
)

urlpatterns = [
    # Report Stock endpoints
    path('inventory/', inventory_list, name='inventory-list'),
    path('inventory/lookup/', inventory_lookup, name='inventory-lookup'),
    path('inventory/delete-all/', inventory_delete_all, name='inventory-delete-all'),
    path('inventory/import/', inventory_import, name='inventory-import'),
    path('inventory/export/', inventory_export, name='inventory-export'),
    path('inventory/<int:pk>/', inventory_detail, name='inventory-detail'),
]
