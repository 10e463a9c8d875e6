from rest_framework import serializers
from .models import CommunityEvent, EventType


class EventFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the events feed.

    Query Parameters:
        event_type (str): Filter by type
        location_state (str): Filter by state, e.g. Lagos
        q (str): Search title, location, venue and contact name
        date_from (date): Events starting on or after this day
        date_to (date): Events starting on or before this day
    """

    event_type = serializers.ChoiceField(choices=EventType.choices, required=False)
    location_state = serializers.CharField(max_length=50, required=False)
    q = serializers.CharField(max_length=200, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)


class CommunityEventSerializer(serializers.ModelSerializer):

    class Meta:
        model = CommunityEvent
        fields = [
            'id',
            'event_id',
            'event_type',
            'title',
            'date_start',
            'date_end',
            'location_raw',
            'location_state',
            'location_city_lga',
            'venue_name',
            'contact_name',
            'contact_role',
            'contact_phone',
            'contact_email',
            'organizer_org',
            'organizer_social',
            'source_platform',
            'source_url',
            'source_published_at',
            'extracted_at',
            'confidence',
            'notes',
        ]
        read_only_fields = fields


EXPORT_FIELDS = [field for field in CommunityEventSerializer.Meta.fields if field != 'id']


class ScrapeRequestSerializer(serializers.Serializer):
    source = serializers.CharField(max_length=100, required=False, allow_blank=True)
