from rest_framework import serializers
from .models import Booking, BookingItem, BookingStatus, Payment


# =============================================================================
# Input Serializers
# =============================================================================

class BookingFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for booking listing.

    Query Parameters:
        status (str): Filter by status
        customer (UUID): Filter by customer
        date_from (date): Bookings ending on or after this day
        date_to (date): Bookings starting on or before this day
    """

    status = serializers.ChoiceField(choices=BookingStatus.choices, required=False)
    customer = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })
        return attrs


class BookingLineInputSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class InitialPaymentInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0.01)
    payment_date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class BookingInputSerializer(serializers.Serializer):
    """
    Validate a booking body for create (POST) and full replace (PUT).

    Dates are calendar days; any time part sent by the client is ignored.
    """

    customer_id = serializers.UUIDField()
    start_date = serializers.CharField()
    end_date = serializers.CharField()
    items = BookingLineInputSerializer(many=True, allow_empty=False)
    status = serializers.ChoiceField(choices=BookingStatus.choices, required=False)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    total_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True, default=None
    )
    advance_payment = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True, default=None
    )
    payment_due_date = serializers.DateField(required=False, allow_null=True, default=None)
    initial_payments = InitialPaymentInputSerializer(many=True, required=False)

    def _validate_day(self, value):
        from apps.core.dates import parse_ymd
        try:
            return parse_ymd(value)
        except ValueError:
            raise serializers.ValidationError('Use the YYYY-MM-DD format.')

    def validate_start_date(self, value):
        return self._validate_day(value)

    def validate_end_date(self, value):
        return self._validate_day(value)


class BookingStatusInputSerializer(serializers.Serializer):
    """PATCH body: status and/or calendar color."""

    status = serializers.ChoiceField(choices=BookingStatus.choices, required=False)
    color = serializers.RegexField(r'^#[0-9a-fA-F]{6}$', required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Provide status or color.')
        return attrs


class PaymentInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Amount must be greater than zero.')
        return value


class CalendarQuerySerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, attrs):
        if attrs['end'] < attrs['start']:
            raise serializers.ValidationError({'end': 'end must not be before start'})
        return attrs


class DayQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class PublicAvailabilityInputSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    item_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False, max_length=100)

    def validate(self, attrs):
        if attrs['end_date'] < attrs['start_date']:
            raise serializers.ValidationError({'end_date': 'End date must not be before start date'})
        return attrs


# =============================================================================
# Output Serializers
# =============================================================================

class BookingItemSerializer(serializers.ModelSerializer):
    item_id = serializers.UUIDField(source='item.id', read_only=True)
    name = serializers.CharField(source='item.name', read_only=True)
    unit = serializers.CharField(source='item.unit', read_only=True)

    class Meta:
        model = BookingItem
        fields = ['id', 'item_id', 'name', 'unit', 'quantity']
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Payment
        fields = ['id', 'booking', 'amount', 'payment_date', 'notes', 'source', 'created_at']
        read_only_fields = fields


class BalanceSerializer(serializers.Serializer):
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    advance_payment = serializers.DecimalField(max_digits=12, decimal_places=2)
    payments_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_paid = serializers.DecimalField(max_digits=12, decimal_places=2)
    remaining_balance = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    is_fully_paid = serializers.BooleanField()


class BookingSerializer(serializers.ModelSerializer):
    """Full booking with lines and balance."""

    customer_name = serializers.CharField(source='customer.name', read_only=True)
    items = BookingItemSerializer(many=True, read_only=True)
    balance = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            'id',
            'owner',
            'customer',
            'customer_name',
            'start_date',
            'end_date',
            'status',
            'reference',
            'notes',
            'color',
            'total_price',
            'advance_payment',
            'payment_due_date',
            'items',
            'balance',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_balance(self, obj):
        from .services import get_balance
        return BalanceSerializer(get_balance(obj)).data


class CalendarEventSerializer(serializers.Serializer):
    """All-day event in the shape FullCalendar consumes."""

    id = serializers.CharField()
    title = serializers.CharField()
    start = serializers.CharField()
    end = serializers.CharField()
    allDay = serializers.BooleanField()
    backgroundColor = serializers.CharField()
    borderColor = serializers.CharField()
    extendedProps = serializers.DictField()


class ReceiptLineSerializer(serializers.Serializer):
    item_id = serializers.CharField()
    name = serializers.CharField()
    unit = serializers.CharField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, allow_null=True)


class ReceiptFinancialSerializer(BalanceSerializer):
    payment_due_date = serializers.DateField(allow_null=True)


class ReceiptPaymentSerializer(serializers.Serializer):
    id = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_date = serializers.DateTimeField()
    notes = serializers.CharField(allow_blank=True)
    source = serializers.CharField()


class ReceiptSerializer(serializers.Serializer):
    receipt_number = serializers.CharField()
    issued_at = serializers.DateTimeField()
    business = serializers.DictField()
    customer = serializers.DictField()
    booking = serializers.DictField()
    items = ReceiptLineSerializer(many=True)
    financial = ReceiptFinancialSerializer()
    payments = ReceiptPaymentSerializer(many=True)


class PublicAvailabilitySerializer(serializers.Serializer):
    item_id = serializers.CharField()
    name = serializers.CharField()
    unit = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    image_url = serializers.CharField(allow_blank=True)
    total_quantity = serializers.IntegerField()
    booked_quantity = serializers.IntegerField()
    available_quantity = serializers.IntegerField()
    is_available = serializers.BooleanField()
