from django.contrib import admin
from .models import Subscription


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ['user', 'plan', 'status', 'current_period_end', 'updated_at']
    list_filter = ['plan', 'status']
    search_fields = ['user__email', 'stripe_customer_id', 'stripe_subscription_id']
    raw_id_fields = ['user']
    readonly_fields = ['created_at', 'updated_at']
