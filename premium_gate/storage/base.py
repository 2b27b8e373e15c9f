from abc import ABC, abstractmethod
from datetime import datetime

from premium_gate.gating.models import ContentGateMetadata, ScheduledRelease, SubscriptionInfo


class ContentStore(ABC):
    """Read/write contract over content gating fields.

    Missing ids raise ContentNotFound; store outages raise TransientStoreError.
    """

    @abstractmethod
    def get_gate_metadata(self, content_id: str) -> ContentGateMetadata:
        raise NotImplementedError

    @abstractmethod
    def get_full_content(self, content_id: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def set_release_date(self, content_id: str, release_date: datetime) -> ScheduledRelease:
        """Overwrite the release date and gate the item until then."""
        raise NotImplementedError

    @abstractmethod
    def clear_release_date(self, content_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_scheduled(self, now: datetime, limit: int) -> list[ScheduledRelease]:
        """Unresolved future releases, soonest first."""
        raise NotImplementedError

    @abstractmethod
    def list_due_for_release(self, now: datetime, limit: int) -> list[ContentGateMetadata]:
        """Non-permanent gated items whose release date (or a zone's free-after date) has passed."""
        raise NotImplementedError

    @abstractmethod
    def apply_release_transition(self, content_id: str, now: datetime) -> bool:
        """Flip due gates to free in one unit of work. False when nothing was left to flip."""
        raise NotImplementedError


class SubscriptionStore(ABC):
    @abstractmethod
    def get_active_subscription(self, user_id: str, now: datetime | None = None) -> SubscriptionInfo | None:
        """Subscription granting access at now if any, else the most recent current-ish one, or None."""
        raise NotImplementedError
