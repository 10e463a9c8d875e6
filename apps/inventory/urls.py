from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'inventory'

router = DefaultRouter()
router.register(r'items', views.ItemViewSet, basename='item')

urlpatterns = [
    # GET    /api/inventory/items/          - List items
    # POST   /api/inventory/items/          - Create item
    # GET    /api/inventory/items/{id}/     - Get item
    # PATCH  /api/inventory/items/{id}/     - Update item
    # DELETE /api/inventory/items/{id}/     - Delete item
    # DELETE /api/inventory/items/bulk/     - Delete all items
    # GET    /api/inventory/items/export/   - CSV export
    path('', include(router.urls)),
]
