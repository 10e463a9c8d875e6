from django.contrib import admin
from django.db.models import Count
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'email', 'owner', 'get_booking_count', 'created_at']
    search_fields = ['name', 'phone', 'email', 'owner__email']
    raw_id_fields = ['owner']
    readonly_fields = ['name', 'created_at', 'updated_at']

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(booking_count=Count('bookings'))

    def get_booking_count(self, obj):
        return obj.booking_count
    get_booking_count.short_description = 'Bookings'
    get_booking_count.admin_order_field = 'booking_count'
