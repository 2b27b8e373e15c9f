"""
Release processor: flips content whose release date has passed from gated to free.

Invoked from outside (Celery beat, POST /admin/releases/process); never schedules itself.
Safe to run concurrently with itself: released items no longer match the due query, and
apply_release_transition reports False for an item another run already flipped.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime

from premium_gate.gating.config import get_release_batch_limit
from premium_gate.gating.errors import GatingError
from premium_gate.gating.models import ReleaseError, ReleaseRunResult
from premium_gate.services.access.cache import AccessDecisionCache
from premium_gate.storage.base import ContentStore
from premium_gate.utils.metrics import (
    content_release_errors_total,
    content_released_total,
    release_run_duration_seconds,
)
from premium_gate.utils.time import as_utc, utcnow

logger = logging.getLogger(__name__)


class ReleaseProcessor:
    def __init__(self, store: ContentStore, cache: AccessDecisionCache | None = None):
        self.store = store
        self.cache = cache

    def process_due(self, now: datetime | None = None, limit: int | None = None) -> ReleaseRunResult:
        """
        Release every due item (at most `limit` per call; the rest waits for the next run).

        Each item is its own unit of work: a failure is recorded in result.errors and
        leaves that item gated for the next run.
        """
        now = as_utc(now) if now is not None else utcnow()
        limit = limit if limit is not None and limit > 0 else get_release_batch_limit()
        started = time.monotonic()
        result = ReleaseRunResult()

        due = self.store.list_due_for_release(now, limit)
        logger.info("release_run_started", extra={"limit": limit})

        for item in due:
            try:
                changed = self.store.apply_release_transition(item.content_id, now)
            except GatingError as exc:
                content_release_errors_total.inc()
                logger.warning(
                    "content_release_failed",
                    extra={"content_id": item.content_id, "error": str(exc)},
                )
                result.errors.append(ReleaseError(content_id=item.content_id, message=str(exc)))
                continue

            if not changed:
                continue
            result.released_count += 1
            content_released_total.inc()
            if self.cache is not None:
                self.cache.invalidate(item.content_id)
            logger.info("content_released", extra={"content_id": item.content_id})

        release_run_duration_seconds.observe(time.monotonic() - started)
        logger.info(
            "release_run_done",
            extra={"released_count": result.released_count, "error_count": len(result.errors)},
        )
        return result
