from rest_framework import serializers
from .models import Customer


class CustomerFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for customer listing.

    Query Parameters:
        search (str): Match on name, phone or email
    """

    search = serializers.CharField(max_length=200, required=False, allow_blank=True)


class CustomerSerializer(serializers.ModelSerializer):
    """Serializer for customers. ``name`` is derived from first and last name."""

    booking_count = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            'id',
            'owner',
            'first_name',
            'last_name',
            'name',
            'phone',
            'email',
            'address',
            'notes',
            'booking_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'owner', 'name', 'created_at', 'updated_at']

    def get_booking_count(self, obj):
        annotated = getattr(obj, 'booking_count', None)
        if annotated is not None:
            return annotated
        return obj.bookings.count()

    def validate_first_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('First name is required.')
        return value

    def validate_last_name(self, value):
        return value.strip()
