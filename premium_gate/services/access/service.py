import logging
from datetime import datetime

from premium_gate.gating.access import evaluate
from premium_gate.gating.errors import ContentNotFound, TransientStoreError
from premium_gate.gating.models import (
    AccessDecision,
    ContentGateMetadata,
    PreviewResult,
    SubscriptionInfo,
    Viewer,
    ViewerRole,
    Zone,
)
from premium_gate.gating.preview import generate_preview
from premium_gate.services.access.cache import AccessDecisionCache
from premium_gate.services.subscriptions.service import SubscriptionResolver
from premium_gate.storage.base import ContentStore, SubscriptionStore
from premium_gate.utils.metrics import access_checks_total
from premium_gate.utils.time import as_utc, utcnow

logger = logging.getLogger(__name__)


class AccessService:
    """Read path: gate metadata + subscription -> evaluate(), with optional decision cache."""

    def __init__(
        self,
        content_store: ContentStore,
        subscription_store: SubscriptionStore,
        cache: AccessDecisionCache | None = None,
        role_bypass: frozenset[ViewerRole] | None = None,
    ):
        self.content_store = content_store
        self.subscriptions = SubscriptionResolver(subscription_store)
        self.cache = cache
        self.role_bypass = role_bypass

    def check(
        self,
        content_id: str,
        viewer: Viewer,
        zone: Zone | None = None,
        now: datetime | None = None,
    ) -> AccessDecision:
        """Raises ContentNotFound for unknown ids and for zones the content is not visible in."""
        now = as_utc(now) if now is not None else utcnow()
        if self.cache is not None:
            cached = self.cache.get(content_id, viewer, zone)
            if cached is not None:
                access_checks_total.labels(reason=cached.reason.value).inc()
                return cached

        metadata = self._metadata(content_id, zone)
        subscription = self.subscriptions.resolve(viewer.id, now)
        decision = self._evaluate(metadata, zone, viewer, subscription, now)

        if self.cache is not None:
            self.cache.set(content_id, viewer, zone, decision, now)
        return decision

    def check_many(
        self,
        content_ids: list[str],
        viewer: Viewer,
        zone: Zone | None = None,
        now: datetime | None = None,
    ) -> list[tuple[str, AccessDecision | None]]:
        """One subscription lookup for the whole list; ids that are unknown or unreadable map to None."""
        now = as_utc(now) if now is not None else utcnow()
        subscription = self.subscriptions.resolve(viewer.id, now)
        results: list[tuple[str, AccessDecision | None]] = []
        for content_id in content_ids:
            try:
                metadata = self._metadata(content_id, zone)
            except ContentNotFound:
                logger.info("bulk_access_content_not_found", extra={"content_id": content_id})
                results.append((content_id, None))
                continue
            except TransientStoreError as exc:
                logger.warning(
                    "bulk_access_content_unavailable",
                    extra={"content_id": content_id, "error": str(exc)},
                )
                results.append((content_id, None))
                continue
            results.append((content_id, self._evaluate(metadata, zone, viewer, subscription, now)))
        return results

    def preview(
        self,
        content_id: str,
        viewer: Viewer,
        zone: Zone | None = None,
        now: datetime | None = None,
    ) -> tuple[AccessDecision, PreviewResult]:
        decision = self.check(content_id, viewer, zone=zone, now=now)
        body = self.content_store.get_full_content(content_id)
        return decision, generate_preview(body, decision)

    def invalidate(self, content_id: str) -> None:
        if self.cache is not None:
            self.cache.invalidate(content_id)

    def _metadata(self, content_id: str, zone: Zone | None) -> ContentGateMetadata:
        metadata = self.content_store.get_gate_metadata(content_id)
        if zone is not None and metadata.zone_setting(zone) is None:
            raise ContentNotFound(content_id, zone=zone.value)
        return metadata

    def _evaluate(
        self,
        metadata: ContentGateMetadata,
        zone: Zone | None,
        viewer: Viewer,
        subscription: SubscriptionInfo | None,
        now: datetime,
    ) -> AccessDecision:
        decision = evaluate(
            metadata,
            zone,
            viewer,
            subscription,
            now=now,
            role_bypass=self.role_bypass,
        )
        access_checks_total.labels(reason=decision.reason.value).inc()
        return decision
