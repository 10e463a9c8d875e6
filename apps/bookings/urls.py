from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'bookings'

router = DefaultRouter()
router.register(r'bookings', views.BookingViewSet, basename='booking')
router.register(r'rentals', views.BookingViewSet, basename='rental')

urlpatterns = [
    # GET    /api/bookings/                   - List bookings
    # POST   /api/bookings/                   - Create booking
    # GET    /api/bookings/{id}/              - Get booking with balance
    # PUT    /api/bookings/{id}/              - Replace booking
    # PATCH  /api/bookings/{id}/              - Change status / color
    # DELETE /api/bookings/{id}/              - Delete booking
    # GET    /api/bookings/{id}/payments/     - List payments
    # POST   /api/bookings/{id}/payments/     - Record payment
    # GET    /api/bookings/{id}/balance/      - Balance
    # GET    /api/bookings/{id}/receipt/      - Receipt
    # GET    /api/bookings/calendar/          - Calendar events
    # GET    /api/bookings/day/               - Day sheet
    # DELETE /api/bookings/bulk/              - Delete all bookings
    # GET    /api/bookings/export/            - CSV export
    # /api/rentals/...                        - Same routes
    path('', include(router.urls)),
    path(
        'public/<slug:slug>/availability/',
        views.public_availability,
        name='public-availability',
    ),
]
