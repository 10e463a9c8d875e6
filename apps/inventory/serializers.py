from rest_framework import serializers
from .models import Item


# =============================================================================
# Input Serializers
# =============================================================================

class ItemFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for item listing.

    Query Parameters:
        search (str): Case-insensitive match on item name
    """

    search = serializers.CharField(max_length=200, required=False, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================

class ItemSerializer(serializers.ModelSerializer):
    """Serializer for items (read and write)."""

    total_quantity = serializers.IntegerField(min_value=0)
    price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Item
        fields = [
            'id',
            'owner',
            'name',
            'unit',
            'total_quantity',
            'price',
            'image_url',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'owner', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value

    def validate_unit(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Unit is required.')
        return value
