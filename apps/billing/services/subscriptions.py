"""Subscription lookup and synchronisation from Stripe subscription objects."""

from datetime import datetime, timezone as dt_timezone
from typing import Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.models import User
from apps.billing.models import Subscription, SubscriptionPlan, SubscriptionStatus
from .exceptions import SubscriptionNotFoundError

logger = structlog.get_logger(__name__)

# Stripe statuses without a direct counterpart
STATUS_MAP = {
    'unpaid': SubscriptionStatus.PAST_DUE,
    'paused': SubscriptionStatus.PAST_DUE,
    'incomplete_expired': SubscriptionStatus.CANCELED,
}


def get_subscription(*, user: User) -> Subscription:
    """Return the user's subscription, creating a free one on first access."""
    subscription, _ = Subscription.objects.get_or_create(user=user)
    return subscription


def get_stripe_customer_id(*, user: User) -> str:
    subscription = Subscription.objects.filter(user=user).first()
    if subscription is None or not subscription.stripe_customer_id:
        raise SubscriptionNotFoundError("No billing account found")
    return subscription.stripe_customer_id


def _plan_from(stripe_subscription) -> Optional[str]:
    metadata = stripe_subscription.get('metadata') or {}
    plan = metadata.get('plan')
    if not plan:
        items = (stripe_subscription.get('items') or {}).get('data') or []
        if items:
            plan = (items[0].get('price') or {}).get('lookup_key')
    return plan if plan in SubscriptionPlan.values else None


def _period_end(stripe_subscription) -> Optional[datetime]:
    timestamp = stripe_subscription.get('current_period_end')
    if timestamp is None:
        items = (stripe_subscription.get('items') or {}).get('data') or []
        if items:
            timestamp = items[0].get('current_period_end')
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=dt_timezone.utc)


def _find_subscription(stripe_subscription) -> Optional[Subscription]:
    subscription = Subscription.objects.filter(
        stripe_subscription_id=stripe_subscription['id']
    ).first()
    if subscription is None and stripe_subscription.get('customer'):
        subscription = Subscription.objects.filter(
            stripe_customer_id=stripe_subscription['customer']
        ).first()
    if subscription is None:
        user_id = (stripe_subscription.get('metadata') or {}).get('user_id')
        try:
            user = User.objects.filter(id=user_id).first() if user_id else None
        except ValidationError:
            user = None
        if user is not None:
            subscription, _ = Subscription.objects.get_or_create(user=user)
    return subscription


@transaction.atomic
def sync_subscription(*, stripe_subscription, deleted: bool = False) -> Optional[Subscription]:
    """
    Mirror a Stripe subscription object onto the matching Subscription.

    Matching is by subscription id, then customer id, then ``metadata.user_id``.
    A deleted subscription drops the user back to the free plan.

    Returns:
        Updated Subscription, or None when no user matches
    """
    subscription = _find_subscription(stripe_subscription)
    if subscription is None:
        logger.warning(
            "subscription_unmatched",
            stripe_subscription_id=stripe_subscription['id'],
            customer=stripe_subscription.get('customer'),
        )
        return None

    subscription.stripe_subscription_id = stripe_subscription['id']
    subscription.stripe_customer_id = stripe_subscription.get('customer') or subscription.stripe_customer_id

    if deleted:
        subscription.plan = SubscriptionPlan.FREE
        subscription.status = SubscriptionStatus.CANCELED
    else:
        stripe_status = stripe_subscription.get('status')
        if stripe_status in SubscriptionStatus.values:
            subscription.status = stripe_status
        else:
            subscription.status = STATUS_MAP.get(stripe_status, SubscriptionStatus.INCOMPLETE)
        plan = _plan_from(stripe_subscription)
        if plan:
            subscription.plan = plan

    subscription.current_period_end = _period_end(stripe_subscription)
    subscription.save()

    logger.info(
        "subscription_synced",
        user_id=str(subscription.user_id),
        plan=subscription.plan,
        status=subscription.status,
    )
    return subscription
