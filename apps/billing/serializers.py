from decimal import Decimal

from rest_framework import serializers
from .models import Subscription


class PaymentInitializeSerializer(serializers.Serializer):
    """
    Validate a card payment request.

    ``amount`` is in major units of the business currency.
    """

    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01'),
        max_value=Decimal('10000000'),
    )
    currency = serializers.CharField(max_length=3, required=False)
    booking_id = serializers.UUIDField(required=False, allow_null=True)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')

    def validate_currency(self, value):
        return value.upper()


class PaymentIntentSerializer(serializers.Serializer):
    client_secret = serializers.CharField()
    payment_intent_id = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class SubscriptionSerializer(serializers.ModelSerializer):
    is_premium = serializers.BooleanField(read_only=True)

    class Meta:
        model = Subscription
        fields = ['plan', 'status', 'is_premium', 'current_period_end', 'updated_at']
        read_only_fields = fields


class PortalSessionSerializer(serializers.Serializer):
    url = serializers.URLField()
