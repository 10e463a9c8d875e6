from django.contrib import admin
from .models import Booking, BookingItem, Payment


class BookingItemInline(admin.TabularInline):
    model = BookingItem
    extra = 0
    raw_id_fields = ['item']


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ['source', 'external_reference', 'created_at']


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['customer', 'start_date', 'end_date', 'status', 'total_price', 'owner', 'created_at']
    list_filter = ['status', 'start_date']
    search_fields = ['reference', 'customer__name', 'owner__email']
    raw_id_fields = ['owner', 'customer']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'start_date'
    inlines = [BookingItemInline, PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['booking', 'amount', 'payment_date', 'source']
    list_filter = ['source', 'payment_date']
    search_fields = ['external_reference', 'booking__reference']
    raw_id_fields = ['booking']
    readonly_fields = ['created_at']
