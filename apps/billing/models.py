from django.conf import settings
from django.db import models
import uuid


class SubscriptionPlan(models.TextChoices):
    FREE = 'free', 'Free'
    PRO = 'pro', 'Pro'
    BUSINESS = 'business', 'Business'


class SubscriptionStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    TRIALING = 'trialing', 'Trialing'
    PAST_DUE = 'past_due', 'Past due'
    CANCELED = 'canceled', 'Canceled'
    INCOMPLETE = 'incomplete', 'Incomplete'


PREMIUM_PLANS = (SubscriptionPlan.PRO, SubscriptionPlan.BUSINESS)
PAID_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING)


class Subscription(models.Model):
    """A user's plan, mirrored from Stripe subscription webhooks."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='subscription',
    )
    plan = models.CharField(
        max_length=20,
        choices=SubscriptionPlan.choices,
        default=SubscriptionPlan.FREE,
    )
    status = models.CharField(
        max_length=20,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.ACTIVE,
    )
    stripe_customer_id = models.CharField(max_length=255, blank=True, db_index=True)
    stripe_subscription_id = models.CharField(max_length=255, blank=True, db_index=True)
    current_period_end = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subscriptions'

    def __str__(self):
        return f"{self.user} - {self.plan} ({self.status})"

    @property
    def is_premium(self):
        return self.plan in PREMIUM_PLANS and self.status in PAID_STATUSES
