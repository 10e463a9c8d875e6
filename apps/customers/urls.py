from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

router = DefaultRouter()
router.register(r'', views.CustomerViewSet, basename='customer')

urlpatterns = [
    # GET    /api/customers/            - List customers
    # POST   /api/customers/            - Create customer
    # GET    /api/customers/{id}/       - Get customer
    # PATCH  /api/customers/{id}/       - Update customer
    # DELETE /api/customers/{id}/       - Delete customer without bookings
    # DELETE /api/customers/bulk/       - Delete all customers without bookings
    # GET    /api/customers/export/     - CSV export
    path('', include(router.urls)),
]
