from django.contrib import admin
from .models import CommunityEvent, EventSourceLog


@admin.register(CommunityEvent)
class CommunityEventAdmin(admin.ModelAdmin):
    list_display = ['title', 'event_type', 'date_start', 'location_state', 'source_platform', 'confidence']
    list_filter = ['event_type', 'location_state', 'source_platform']
    search_fields = ['title', 'location_raw', 'venue_name', 'contact_name']
    readonly_fields = ['event_id', 'extracted_at', 'created_at', 'updated_at']
    date_hierarchy = 'date_start'


@admin.register(EventSourceLog)
class EventSourceLogAdmin(admin.ModelAdmin):
    list_display = ['source_platform', 'run_at', 'events_found', 'events_added', 'events_updated', 'total_active']
    list_filter = ['source_platform']
    readonly_fields = [field.name for field in EventSourceLog._meta.fields]
