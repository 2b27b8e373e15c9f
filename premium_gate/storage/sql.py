"""
SQLAlchemy-backed stores. One session per store instance; every write commits
(or rolls back) its own item so batch callers get per-item outcomes.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from premium_gate.gating.errors import ContentNotFound, TransientStoreError
from premium_gate.gating.models import (
    ContentGateMetadata,
    ScheduledRelease,
    SubscriptionInfo,
    SubscriptionStatus,
    Zone,
    ZoneGate,
)
from premium_gate.models.content import ContentItem, ContentZoneSetting
from premium_gate.models.subscription import Subscription
from premium_gate.storage.base import ContentStore, SubscriptionStore
from premium_gate.utils.time import as_utc, utcnow

logger = logging.getLogger(__name__)

# PAST_DUE rows are returned too; the evaluator decides whether they grant anything.
CURRENT_STATUSES = (
    SubscriptionStatus.ACTIVE.value,
    SubscriptionStatus.TRIALING.value,
    SubscriptionStatus.PAST_DUE.value,
)
GRANTING_STATUSES = (SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value)


class SqlContentStore(ContentStore):
    def __init__(self, db: Session):
        self.db = db

    def _get(self, content_id: str, for_update: bool = False) -> ContentItem:
        query = self.db.query(ContentItem).filter(ContentItem.id == content_id)
        if for_update:
            query = query.with_for_update()
        item = query.one_or_none()
        if item is None:
            raise ContentNotFound(content_id)
        return item

    def get_gate_metadata(self, content_id: str) -> ContentGateMetadata:
        try:
            item = self._get(content_id)
        except SQLAlchemyError as exc:
            raise TransientStoreError(str(exc), content_id=content_id) from exc
        return _to_metadata(item)

    def get_full_content(self, content_id: str) -> str:
        try:
            item = self._get(content_id)
        except SQLAlchemyError as exc:
            raise TransientStoreError(str(exc), content_id=content_id) from exc
        return item.body or ""

    def set_release_date(self, content_id: str, release_date: datetime) -> ScheduledRelease:
        try:
            item = self._get(content_id)
            item.premium_release_date = release_date
            item.premium_released_at = None
            item.is_premium = True
            self.db.add(item)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise TransientStoreError(str(exc), content_id=content_id) from exc
        return _to_scheduled(item)

    def clear_release_date(self, content_id: str) -> None:
        try:
            item = self._get(content_id)
            item.premium_release_date = None
            self.db.add(item)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise TransientStoreError(str(exc), content_id=content_id) from exc

    def list_scheduled(self, now: datetime, limit: int) -> list[ScheduledRelease]:
        try:
            items = (
                self.db.query(ContentItem)
                .filter(
                    ContentItem.is_premium.is_(True),
                    ContentItem.is_permanent_premium.is_(False),
                    ContentItem.premium_release_date.isnot(None),
                    ContentItem.premium_release_date > now,
                )
                .order_by(ContentItem.premium_release_date.asc(), ContentItem.id.asc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            raise TransientStoreError(str(exc)) from exc
        return [_to_scheduled(item, now) for item in items]

    def list_due_for_release(self, now: datetime, limit: int) -> list[ContentGateMetadata]:
        premium_due = and_(
            ContentItem.is_premium.is_(True),
            ContentItem.premium_release_date.isnot(None),
            ContentItem.premium_release_date <= now,
        )
        zone_due = ContentItem.zone_settings.any(
            and_(
                ContentZoneSetting.requires_subscription.is_(True),
                ContentZoneSetting.free_after_date.isnot(None),
                ContentZoneSetting.free_after_date <= now,
            )
        )
        try:
            items = (
                self.db.query(ContentItem)
                .filter(ContentItem.is_permanent_premium.is_(False), or_(premium_due, zone_due))
                .order_by(ContentItem.created_at.asc(), ContentItem.id.asc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            raise TransientStoreError(str(exc)) from exc
        return [_to_metadata(item) for item in items]

    def apply_release_transition(self, content_id: str, now: datetime) -> bool:
        try:
            try:
                item = self._get(content_id, for_update=True)
            except ContentNotFound:
                self.db.rollback()
                raise

            changed = False
            if not item.is_permanent_premium:
                release_date = as_utc(item.premium_release_date)
                # The content date releases every zone with it.
                content_due = item.is_premium and release_date is not None and release_date <= now
                if content_due:
                    item.is_premium = False
                    changed = True
                for zone_setting in item.zone_settings:
                    if not zone_setting.requires_subscription:
                        continue
                    free_after = as_utc(zone_setting.free_after_date)
                    if content_due or (free_after is not None and free_after <= now):
                        zone_setting.requires_subscription = False
                        self.db.add(zone_setting)
                        changed = True

            if not changed:
                # Another run got here first (or the item was never due): release the row lock.
                self.db.rollback()
                return False

            item.premium_released_at = now
            self.db.add(item)
            self.db.commit()
            return True
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise TransientStoreError(str(exc), content_id=content_id) from exc


class SqlSubscriptionStore(SubscriptionStore):
    def __init__(self, db: Session):
        self.db = db

    def get_active_subscription(self, user_id: str, now: datetime | None = None) -> SubscriptionInfo | None:
        """
        The subscription that grants access at `now` (ACTIVE / TRIALING, period covering now),
        latest period end first. Without one, the latest ACTIVE / TRIALING / PAST_DUE row so
        callers can still show status.
        """
        now = as_utc(now) if now is not None else utcnow()
        base = self.db.query(Subscription).filter(Subscription.user_id == user_id)
        try:
            row = (
                base.filter(
                    Subscription.status.in_(GRANTING_STATUSES),
                    Subscription.current_period_start <= now,
                    Subscription.current_period_end >= now,
                )
                .order_by(Subscription.current_period_end.desc())
                .first()
            )
            if row is None:
                row = (
                    base.filter(Subscription.status.in_(CURRENT_STATUSES))
                    .order_by(Subscription.current_period_end.desc())
                    .first()
                )
        except SQLAlchemyError as exc:
            raise TransientStoreError(str(exc)) from exc
        if row is None:
            return None
        return SubscriptionInfo(
            id=row.id,
            user_id=row.user_id,
            plan_id=row.plan_id,
            status=SubscriptionStatus(row.status),
            current_period_start=as_utc(row.current_period_start),
            current_period_end=as_utc(row.current_period_end),
            cancel_at_period_end=bool(row.cancel_at_period_end),
        )


def _to_metadata(item: ContentItem) -> ContentGateMetadata:
    zones = []
    for zone_setting in item.zone_settings:
        try:
            zone = Zone(str(zone_setting.zone).upper())
        except ValueError:
            logger.warning(
                "content_zone_unknown",
                extra={"content_id": item.id, "zone": zone_setting.zone},
            )
            continue
        zones.append(
            ZoneGate(
                zone=zone,
                visible=bool(zone_setting.visible),
                requires_subscription=bool(zone_setting.requires_subscription),
                free_after_date=as_utc(zone_setting.free_after_date),
            )
        )
    return ContentGateMetadata(
        content_id=item.id,
        is_premium=bool(item.is_premium),
        premium_release_date=as_utc(item.premium_release_date),
        is_permanent_premium=bool(item.is_permanent_premium),
        zones=tuple(zones),
    )


def _to_scheduled(item: ContentItem, now: datetime | None = None) -> ScheduledRelease:
    scheduled_for = as_utc(item.premium_release_date)
    days_until = None
    if now is not None and scheduled_for is not None:
        days_until = max(0, math.ceil((scheduled_for - now).total_seconds() / 86400))
    return ScheduledRelease(
        content_id=item.id,
        scheduled_for=scheduled_for,
        released=item.premium_released_at is not None and not item.is_premium,
        released_at=as_utc(item.premium_released_at),
        title=item.title,
        slug=item.slug,
        days_until_release=days_until,
    )
