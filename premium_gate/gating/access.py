"""
Decision only: evaluate(content, zone, viewer, subscription) -> AccessDecision.
Pure function over its inputs plus the clock, no I/O. First matching rule wins:

1. scope not premium and no subscription required -> FREE_CONTENT
2. permanent premium -> release dates are ignored
3. content release date reached -> FREE_CONTENT (every zone with it);
   a zone's own free-after date reached -> that zone is FREE_CONTENT
4. ACTIVE / TRIALING subscription covering now -> SUBSCRIPTION / TRIAL
   (then the configured role bypass -> ROLE)
5. otherwise -> NONE, upgrade required, release date echoed
"""
from __future__ import annotations

import math
import logging
from datetime import datetime

from premium_gate.gating.config import get_preview_words, get_role_bypass, get_upgrade_url
from premium_gate.gating.models import (
    AccessDecision,
    AccessReason,
    ContentGateMetadata,
    GatingState,
    SubscriptionInfo,
    SubscriptionStatus,
    Viewer,
    ViewerRole,
    Zone,
    ZoneGate,
)
from premium_gate.utils.time import as_utc, utcnow

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


def evaluate(
    content: ContentGateMetadata,
    zone: Zone | None = None,
    viewer: Viewer | None = None,
    subscription: SubscriptionInfo | None = None,
    *,
    now: datetime | None = None,
    role_bypass: frozenset[ViewerRole] | None = None,
) -> AccessDecision:
    """
    Decide whether the viewer sees the full content.

    zone: evaluate against that zone's setting; a zone the content is not visible in
    is denied without an upgrade offer.
    subscription: the viewer's current subscription (None = no subscription, not an error).
    role_bypass: roles that pass gated content of their own zone; defaults to settings.
    """
    now = as_utc(now) if now is not None else utcnow()
    viewer = viewer or Viewer()

    if zone is not None:
        zone_gate = content.zone_setting(zone)
        if zone_gate is None:
            return AccessDecision(has_access=False, reason=AccessReason.NONE, requires_upgrade=False)
        gated_zones = (zone_gate,) if zone_gate.requires_subscription else ()
    else:
        gated_zones = tuple(z for z in content.visible_zones if z.requires_subscription)

    # 1. Nothing gates this scope
    if not content.is_premium and not gated_zones:
        return AccessDecision(has_access=True, reason=AccessReason.FREE_CONTENT)

    # 2./3. Graduation by release date (never for permanent premium)
    release_date = None
    if not content.is_permanent_premium:
        # The content's own date lifts every gate on the item, zones included.
        if content.is_premium and _passed(content.premium_release_date, now):
            return AccessDecision(
                has_access=True,
                reason=AccessReason.FREE_CONTENT,
                release_date=content.premium_release_date,
            )
        # A zone's free-after date lifts that zone only.
        pending = tuple(z for z in gated_zones if not _passed(z.free_after_date, now))
        if not content.is_premium and not pending:
            return AccessDecision(
                has_access=True,
                reason=AccessReason.FREE_CONTENT,
                release_date=max(z.free_after_date for z in gated_zones),
            )
        release_date = _release_date(content, pending)

    # 4. Subscription or trial
    if subscription is not None and not viewer.is_anonymous and subscription.grants_access(now):
        if subscription.status == SubscriptionStatus.TRIALING:
            return AccessDecision(
                has_access=True,
                reason=AccessReason.TRIAL,
                release_date=release_date,
                trial_days_left=_days_left(subscription.current_period_end, now),
            )
        return AccessDecision(
            has_access=True,
            reason=AccessReason.SUBSCRIPTION,
            release_date=release_date,
        )

    bypass = get_role_bypass() if role_bypass is None else role_bypass
    if _role_passes(viewer.role, zone, bypass):
        return AccessDecision(has_access=True, reason=AccessReason.ROLE, release_date=release_date)

    # 5. Denied
    return AccessDecision(
        has_access=False,
        reason=AccessReason.NONE,
        requires_upgrade=True,
        release_date=release_date,
        upgrade_url=get_upgrade_url(viewer.is_anonymous),
        preview_words=get_preview_words(viewer.is_anonymous),
    )


def gating_state(content: ContentGateMetadata) -> GatingState:
    """Where the item sits in the gating state machine (zones taken together)."""
    gated_zones = tuple(z for z in content.visible_zones if z.requires_subscription)
    if not content.is_premium and not gated_zones:
        return GatingState.FREE
    if content.is_permanent_premium:
        return GatingState.GATED_PERMANENT
    if _release_date(content, gated_zones) is not None:
        return GatingState.GATED_SCHEDULED
    return GatingState.GATED_NO_SCHEDULE


def _release_date(content: ContentGateMetadata, gated_zones: tuple[ZoneGate, ...]) -> datetime | None:
    """Moment the scope opens to everyone; None when some gate has no date."""
    if content.is_premium:
        return content.premium_release_date
    dates = [z.free_after_date for z in gated_zones]
    if not dates or any(d is None for d in dates):
        return None
    return max(dates)


def _passed(moment: datetime | None, now: datetime) -> bool:
    return moment is not None and now >= moment


def _days_left(period_end: datetime, now: datetime) -> int:
    return max(0, math.ceil((period_end - now).total_seconds() / SECONDS_PER_DAY))


def _role_passes(role: ViewerRole, zone: Zone | None, bypass: frozenset[ViewerRole]) -> bool:
    if role not in bypass:
        return False
    if role == ViewerRole.ADMIN:
        return True
    return zone is not None and zone.value == role.value
