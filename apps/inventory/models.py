from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class Item(models.Model):
    """
    A rentable stock line, e.g. "Chiavari chair" with 120 units.

    ``total_quantity`` is the size of the stock. How many units are free on
    a given day is derived from the active bookings covering that day.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='items',
    )

    name = models.CharField(max_length=200)
    unit = models.CharField(max_length=50, help_text="Unit label, e.g. pcs, sets, metres")
    total_quantity = models.PositiveIntegerField(default=0)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Rental price per unit",
    )
    image_url = models.URLField(max_length=500, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['owner', 'name'], name='items_owner_name_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.total_quantity} {self.unit})"
