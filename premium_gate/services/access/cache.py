"""
Short-lived Redis cache for AccessDecision, keyed by (content, viewer, role, zone).
A Redis outage degrades to a cache miss; access checks never fail because of it.
"""
from __future__ import annotations

import logging
import math
import re
from datetime import datetime

import redis
from pydantic import ValidationError as PydanticValidationError

from premium_gate.core.config import settings
from premium_gate.gating.config import get_access_cache_ttl
from premium_gate.gating.models import AccessDecision, Viewer, Zone

logger = logging.getLogger(__name__)

KEY_PREFIX = "access"
_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


class AccessDecisionCache:
    def __init__(self, client: redis.Redis | None = None, ttl_seconds: int | None = None) -> None:
        self.client = client or redis.Redis.from_url(settings.redis_url, decode_responses=True)
        self.default_ttl = ttl_seconds if ttl_seconds is not None else get_access_cache_ttl()

    def key(self, content_id: str, viewer: Viewer, zone: Zone | None) -> str:
        viewer_part = viewer.id or "anonymous"
        zone_part = zone.value if zone is not None else "-"
        return f"{KEY_PREFIX}:{content_id}:{viewer_part}:{viewer.role.value}:{zone_part}"

    def get(self, content_id: str, viewer: Viewer, zone: Zone | None) -> AccessDecision | None:
        key = self.key(content_id, viewer, zone)
        try:
            raw = self.client.get(key)
        except redis.RedisError:
            logger.warning("access_cache_get_failed", extra={"content_id": content_id}, exc_info=True)
            return None
        if not raw:
            return None
        try:
            return AccessDecision.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("access_cache_corrupt_entry", extra={"content_id": content_id})
            return None

    def set(
        self,
        content_id: str,
        viewer: Viewer,
        zone: Zone | None,
        decision: AccessDecision,
        now: datetime,
    ) -> None:
        ttl = self.ttl_for(decision, now)
        if ttl <= 0:
            return
        try:
            self.client.setex(self.key(content_id, viewer, zone), ttl, decision.model_dump_json())
        except redis.RedisError:
            logger.warning("access_cache_set_failed", extra={"content_id": content_id}, exc_info=True)

    def ttl_for(self, decision: AccessDecision, now: datetime) -> int:
        """Default TTL, cut short so a cached denial never outlives a pending release date."""
        ttl = self.default_ttl
        if decision.release_date is not None and decision.release_date > now:
            ttl = min(ttl, math.ceil((decision.release_date - now).total_seconds()))
        return int(ttl)

    def invalidate(self, content_id: str) -> int:
        try:
            keys = list(self.client.scan_iter(match=f"{KEY_PREFIX}:{_glob_escape(content_id)}:*"))
            if keys:
                self.client.delete(*keys)
        except redis.RedisError:
            logger.warning("access_cache_invalidate_failed", extra={"content_id": content_id}, exc_info=True)
            return 0
        return len(keys)


def _glob_escape(value: str) -> str:
    """Escape Redis glob metacharacters so SCAN MATCH treats value literally."""
    return _GLOB_SPECIAL.sub(r"\\\1", value)
