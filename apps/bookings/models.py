from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone
from decimal import Decimal
import uuid

from apps.customers.models import Customer
from apps.inventory.models import Item


class BookingStatus(models.TextChoices):
    DRAFT = 'DRAFT', 'Draft'
    CONFIRMED = 'CONFIRMED', 'Confirmed'
    OUT = 'OUT', 'Out'
    RETURNED = 'RETURNED', 'Returned'
    CANCELLED = 'CANCELLED', 'Cancelled'


# Only these statuses hold stock
ACTIVE_BOOKING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.OUT)


class PaymentSource(models.TextChoices):
    MANUAL = 'manual', 'Manual'
    STRIPE = 'stripe', 'Stripe'


class Booking(models.Model):
    """
    A rental: one customer taking one or more items over a range of days.

    ``start_date`` and ``end_date`` are inclusive calendar days. Amounts are
    in the owner's business currency.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='bookings',
    )
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name='bookings',
    )

    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(
        max_length=12,
        choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED,
        db_index=True,
    )

    reference = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    color = models.CharField(max_length=7, blank=True)

    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    advance_payment = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    payment_due_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bookings'
        ordering = ['-start_date', '-created_at']
        indexes = [
            models.Index(fields=['owner', 'status'], name='bookings_owner_status_idx'),
            models.Index(fields=['start_date', 'end_date'], name='bookings_dates_idx'),
        ]

    def __str__(self):
        return f"{self.customer} {self.start_date} → {self.end_date} ({self.status})"

    @property
    def is_active(self):
        return self.status in ACTIVE_BOOKING_STATUSES

    @property
    def duration_days(self):
        return (self.end_date - self.start_date).days + 1


class BookingItem(models.Model):
    """Quantity of one item held by a booking."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name='items',
    )
    item = models.ForeignKey(
        Item,
        on_delete=models.CASCADE,
        related_name='booking_items',
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        db_table = 'booking_items'
        constraints = [
            models.UniqueConstraint(fields=['booking', 'item'], name='unique_booking_item'),
        ]

    def __str__(self):
        return f"{self.item.name} ×{self.quantity}"


class Payment(models.Model):
    """Money received against a booking, in addition to its advance payment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name='payments',
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    payment_date = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)
    source = models.CharField(
        max_length=10,
        choices=PaymentSource.choices,
        default=PaymentSource.MANUAL,
    )
    # Processor id (e.g. Stripe payment intent), used to ignore replays
    external_reference = models.CharField(max_length=255, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-payment_date', '-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['external_reference'],
                condition=~Q(external_reference=''),
                name='unique_payment_external_reference',
            ),
        ]

    def __str__(self):
        return f"{self.amount} for booking {self.booking_id}"
