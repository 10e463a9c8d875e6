from django.conf import settings
from django.db import models
import uuid


class Customer(models.Model):
    """A person or organisation renting items."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='customers',
    )

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    # Display name, always "<first> <last>"
    name = models.CharField(max_length=201, editable=False)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(max_length=255, blank=True)
    address = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['first_name', 'last_name']
        indexes = [
            models.Index(fields=['owner', 'first_name'], name='customers_owner_first_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name = f"{self.first_name} {self.last_name}".strip()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and {'first_name', 'last_name'} & set(update_fields):
            kwargs['update_fields'] = set(update_fields) | {'name'}
        super().save(*args, **kwargs)
