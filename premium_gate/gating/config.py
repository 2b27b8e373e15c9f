"""
Gating config: typed wrappers over premium_gate.core.config.settings.
"""
from __future__ import annotations

import logging

from premium_gate.core.config import settings
from premium_gate.gating.models import ViewerRole

logger = logging.getLogger(__name__)


def get_role_bypass() -> frozenset[ViewerRole]:
    roles = set()
    for name in settings.role_bypass_set:
        try:
            roles.add(ViewerRole(name))
        except ValueError:
            logger.warning("role_bypass_unknown_role", extra={"error": name})
    return frozenset(roles)


def get_upgrade_url(anonymous: bool) -> str:
    return settings.upgrade_url_anonymous if anonymous else settings.upgrade_url_member


def get_preview_words(anonymous: bool) -> int:
    return settings.preview_words_anonymous if anonymous else settings.preview_words_member


def get_words_per_minute() -> int:
    return settings.reading_words_per_minute


def get_access_cache_ttl() -> int:
    return settings.access_cache_ttl


def clamp_scheduled_limit(limit: int | None) -> int:
    """Clamp to 1..scheduled_list_max_limit; None means the default page size."""
    if limit is None:
        limit = settings.scheduled_list_default_limit
    return max(1, min(int(limit), settings.scheduled_list_max_limit))


def get_batch_max_ids() -> int:
    return settings.batch_schedule_max_ids


def get_bulk_access_max_ids() -> int:
    return settings.bulk_access_max_ids


def get_release_batch_limit() -> int:
    return settings.release_batch_limit
