"""
Release scheduling: set / clear the date at which a gated item becomes free,
and list what is pending. BatchReleaseScheduler applies one date to many items,
best effort: a bad id is reported, the rest still get scheduled.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from premium_gate.gating.config import clamp_scheduled_limit, get_batch_max_ids
from premium_gate.gating.errors import (
    InvalidReleaseDate,
    NotFound,
    TransientStoreError,
    ValidationError,
)
from premium_gate.gating.models import BatchScheduleResult, ScheduledRelease
from premium_gate.services.access.cache import AccessDecisionCache
from premium_gate.storage.base import ContentStore
from premium_gate.utils.metrics import releases_scheduled_total
from premium_gate.utils.time import as_utc, parse_timestamp, utcnow

logger = logging.getLogger(__name__)


class ReleaseScheduler:
    def __init__(self, store: ContentStore, cache: AccessDecisionCache | None = None):
        self.store = store
        self.cache = cache

    @staticmethod
    def validate_release_date(value: str | datetime, now: datetime | None = None) -> datetime:
        """Parse value to aware UTC and require it to be strictly after now."""
        now = as_utc(now) if now is not None else utcnow()
        try:
            when = parse_timestamp(value)
        except (TypeError, ValueError) as exc:
            raise InvalidReleaseDate(value, "Release date is not a valid timestamp") from exc
        if when <= now:
            raise InvalidReleaseDate(value, "Release date must be in the future")
        return when

    def schedule(
        self,
        content_id: str,
        release_date: str | datetime,
        now: datetime | None = None,
    ) -> ScheduledRelease:
        """
        Set (or overwrite) the item's release date.

        Raises InvalidReleaseDate before touching the store, NotFound for unknown ids.
        A permanently premium item keeps the date but stays gated until the flag is cleared.
        """
        try:
            when = self.validate_release_date(release_date, now)
        except InvalidReleaseDate:
            releases_scheduled_total.labels(outcome="invalid_date").inc()
            raise
        return self.apply_validated(content_id, when)

    def apply_validated(self, content_id: str, when: datetime) -> ScheduledRelease:
        try:
            metadata = self.store.get_gate_metadata(content_id)
            scheduled = self.store.set_release_date(content_id, when)
        except NotFound:
            releases_scheduled_total.labels(outcome="not_found").inc()
            raise
        except TransientStoreError:
            releases_scheduled_total.labels(outcome="store_error").inc()
            raise

        if metadata.is_permanent_premium:
            logger.warning(
                "release_scheduled_on_permanent_premium",
                extra={"content_id": content_id, "release_date": when.isoformat()},
            )
        self._invalidate(content_id)
        releases_scheduled_total.labels(outcome="scheduled").inc()
        logger.info(
            "release_scheduled",
            extra={"content_id": content_id, "release_date": when.isoformat()},
        )
        return scheduled

    def unschedule(self, content_id: str) -> None:
        """Clear the release date; the item stays gated with no schedule."""
        self.store.clear_release_date(content_id)
        self._invalidate(content_id)
        releases_scheduled_total.labels(outcome="unscheduled").inc()
        logger.info("release_unscheduled", extra={"content_id": content_id})

    def list_pending(self, limit: int | None = None, now: datetime | None = None) -> list[ScheduledRelease]:
        """Future, unresolved releases soonest first; limit is clamped, never rejected."""
        now = as_utc(now) if now is not None else utcnow()
        return self.store.list_scheduled(now, clamp_scheduled_limit(limit))

    def _invalidate(self, content_id: str) -> None:
        if self.cache is not None:
            self.cache.invalidate(content_id)


class BatchReleaseScheduler:
    def __init__(self, scheduler: ReleaseScheduler):
        self.scheduler = scheduler

    def schedule_batch(
        self,
        content_ids: Iterable[str],
        release_date: str | datetime,
        now: datetime | None = None,
    ) -> BatchScheduleResult:
        """
        Schedule every id for the same date; not a transaction.

        The list and the date are validated once up front (ValidationError /
        InvalidReleaseDate); after that, per-id failures land in result.failed.
        """
        ids = self._validate_ids(content_ids)
        try:
            when = self.scheduler.validate_release_date(release_date, now)
        except InvalidReleaseDate:
            releases_scheduled_total.labels(outcome="invalid_date").inc()
            raise

        result = BatchScheduleResult()
        for content_id in ids:
            try:
                self.scheduler.apply_validated(content_id, when)
            except (NotFound, TransientStoreError) as exc:
                logger.warning(
                    "batch_schedule_item_failed",
                    extra={"content_id": content_id, "error": str(exc)},
                )
                result.failed.append(content_id)
                continue
            result.success_count += 1

        logger.info(
            "batch_schedule_done",
            extra={
                "success_count": result.success_count,
                "failed_count": len(result.failed),
                "release_date": when.isoformat(),
            },
        )
        return result

    @staticmethod
    def _validate_ids(content_ids: Iterable[str]) -> list[str]:
        if content_ids is None or isinstance(content_ids, str):
            raise ValidationError("content_ids must be a list of ids")
        ids = list(dict.fromkeys(content_ids))
        if not ids:
            raise ValidationError("content_ids must not be empty")
        if any(not isinstance(i, str) or not i.strip() for i in ids):
            raise ValidationError("content_ids must be non-empty strings")
        max_ids = get_batch_max_ids()
        if len(ids) > max_ids:
            raise ValidationError(f"At most {max_ids} content ids per batch")
        return ids
