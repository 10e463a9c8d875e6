from django.contrib import admin
from .models import Item


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'unit', 'total_quantity', 'price', 'owner', 'updated_at']
    list_filter = ['unit', 'created_at']
    search_fields = ['name', 'notes', 'owner__email']
    raw_id_fields = ['owner']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['name']
