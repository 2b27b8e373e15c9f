import logging
from datetime import datetime

from premium_gate.gating.models import SubscriptionInfo
from premium_gate.schemas.premium import SubscriptionOut
from premium_gate.storage.base import SubscriptionStore
from premium_gate.utils.time import as_utc, utcnow

logger = logging.getLogger(__name__)


class SubscriptionResolver:
    """Viewer id -> current subscription. Anonymous viewers and unknown users resolve to None."""

    def __init__(self, store: SubscriptionStore):
        self.store = store

    def resolve(self, user_id: str | None, now: datetime | None = None) -> SubscriptionInfo | None:
        if not user_id:
            return None
        return self.store.get_active_subscription(user_id, now)

    def describe(self, user_id: str, now: datetime | None = None) -> SubscriptionOut | None:
        """Subscription as shown to its owner: is_active and whole days remaining."""
        now = as_utc(now) if now is not None else utcnow()
        subscription = self.resolve(user_id, now)
        if subscription is None:
            return None
        return SubscriptionOut(
            id=subscription.id,
            plan_id=subscription.plan_id,
            status=subscription.status,
            current_period_start=subscription.current_period_start,
            current_period_end=subscription.current_period_end,
            cancel_at_period_end=subscription.cancel_at_period_end,
            is_active=subscription.grants_access(now),
            days_remaining=subscription.days_remaining(now),
        )
