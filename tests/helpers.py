"""In-memory stores behind the ContentStore / SubscriptionStore interfaces, plus shared clock constants."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from premium_gate.gating.errors import ContentNotFound, TransientStoreError
from premium_gate.gating.models import (
    ContentGateMetadata,
    ScheduledRelease,
    SubscriptionInfo,
    Zone,
    ZoneGate,
)
from premium_gate.storage.base import ContentStore, SubscriptionStore

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
DAY = timedelta(days=1)


@dataclass
class FakeZone:
    zone: Zone
    visible: bool = True
    requires_subscription: bool = False
    free_after_date: datetime | None = None


@dataclass
class FakeItem:
    content_id: str
    title: str = "Article"
    body: str = ""
    is_premium: bool = False
    premium_release_date: datetime | None = None
    is_permanent_premium: bool = False
    premium_released_at: datetime | None = None
    zones: list[FakeZone] = field(default_factory=list)


class InMemoryContentStore(ContentStore):
    def __init__(self):
        self.items: dict[str, FakeItem] = {}
        self.unavailable: set[str] = set()  # ids whose reads/writes raise TransientStoreError
        self.transition_calls: list[str] = []

    def add(self, content_id: str, zones: list[FakeZone] | None = None, **kwargs) -> FakeItem:
        item = FakeItem(content_id=content_id, zones=zones or [], **kwargs)
        self.items[content_id] = item
        return item

    def _get(self, content_id: str) -> FakeItem:
        if content_id in self.unavailable:
            raise TransientStoreError("store unavailable", content_id=content_id)
        item = self.items.get(content_id)
        if item is None:
            raise ContentNotFound(content_id)
        return item

    def get_gate_metadata(self, content_id: str) -> ContentGateMetadata:
        item = self._get(content_id)
        return ContentGateMetadata(
            content_id=item.content_id,
            is_premium=item.is_premium,
            premium_release_date=item.premium_release_date,
            is_permanent_premium=item.is_permanent_premium,
            zones=tuple(
                ZoneGate(
                    zone=z.zone,
                    visible=z.visible,
                    requires_subscription=z.requires_subscription,
                    free_after_date=z.free_after_date,
                )
                for z in item.zones
            ),
        )

    def get_full_content(self, content_id: str) -> str:
        return self._get(content_id).body

    def set_release_date(self, content_id: str, release_date: datetime) -> ScheduledRelease:
        item = self._get(content_id)
        item.premium_release_date = release_date
        item.premium_released_at = None
        item.is_premium = True
        return ScheduledRelease(content_id=content_id, scheduled_for=release_date, title=item.title)

    def clear_release_date(self, content_id: str) -> None:
        self._get(content_id).premium_release_date = None

    def list_scheduled(self, now: datetime, limit: int) -> list[ScheduledRelease]:
        pending = [
            i for i in self.items.values()
            if i.is_premium
            and not i.is_permanent_premium
            and i.premium_release_date is not None
            and i.premium_release_date > now
        ]
        pending.sort(key=lambda i: (i.premium_release_date, i.content_id))
        return [
            ScheduledRelease(content_id=i.content_id, scheduled_for=i.premium_release_date, title=i.title)
            for i in pending[:limit]
        ]

    def list_due_for_release(self, now: datetime, limit: int) -> list[ContentGateMetadata]:
        due = []
        for item in self.items.values():
            if item.is_permanent_premium:
                continue
            premium_due = (
                item.is_premium
                and item.premium_release_date is not None
                and item.premium_release_date <= now
            )
            zone_due = any(
                z.requires_subscription and z.free_after_date is not None and z.free_after_date <= now
                for z in item.zones
            )
            if premium_due or zone_due:
                due.append(self.get_gate_metadata(item.content_id))
        return due[:limit]

    def apply_release_transition(self, content_id: str, now: datetime) -> bool:
        self.transition_calls.append(content_id)
        item = self._get(content_id)
        if item.is_permanent_premium:
            return False
        changed = False
        content_due = (
            item.is_premium and item.premium_release_date is not None and item.premium_release_date <= now
        )
        if content_due:
            item.is_premium = False
            changed = True
        for z in item.zones:
            if not z.requires_subscription:
                continue
            if content_due or (z.free_after_date is not None and z.free_after_date <= now):
                z.requires_subscription = False
                changed = True
        if changed:
            item.premium_released_at = now
        return changed


class InMemorySubscriptionStore(SubscriptionStore):
    def __init__(self):
        self.subscriptions: dict[str, SubscriptionInfo] = {}
        self.lookups: list[str] = []

    def add(self, subscription: SubscriptionInfo) -> None:
        self.subscriptions[subscription.user_id] = subscription

    def get_active_subscription(self, user_id: str, now: datetime | None = None) -> SubscriptionInfo | None:
        self.lookups.append(user_id)
        return self.subscriptions.get(user_id)


