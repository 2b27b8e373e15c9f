"""
Request-scoped wiring: stores are built on the request's DB session, the decision
cache is shared for the process.
"""
from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from premium_gate.core.config import settings
from premium_gate.db.session import get_db
from premium_gate.services.access.cache import AccessDecisionCache
from premium_gate.services.access.service import AccessService
from premium_gate.services.releases.processor import ReleaseProcessor
from premium_gate.services.releases.scheduler import BatchReleaseScheduler, ReleaseScheduler
from premium_gate.storage.sql import SqlContentStore, SqlSubscriptionStore


@lru_cache(maxsize=1)
def _shared_cache() -> AccessDecisionCache:
    return AccessDecisionCache()


def get_access_cache() -> AccessDecisionCache | None:
    if not settings.access_cache_enabled:
        return None
    return _shared_cache()


def get_content_store(db: Session = Depends(get_db)) -> SqlContentStore:
    return SqlContentStore(db)


def get_subscription_store(db: Session = Depends(get_db)) -> SqlSubscriptionStore:
    return SqlSubscriptionStore(db)


def get_access_service(
    content_store: SqlContentStore = Depends(get_content_store),
    subscription_store: SqlSubscriptionStore = Depends(get_subscription_store),
    cache: AccessDecisionCache | None = Depends(get_access_cache),
) -> AccessService:
    return AccessService(content_store, subscription_store, cache=cache)


def get_release_scheduler(
    content_store: SqlContentStore = Depends(get_content_store),
    cache: AccessDecisionCache | None = Depends(get_access_cache),
) -> ReleaseScheduler:
    return ReleaseScheduler(content_store, cache=cache)


def get_batch_scheduler(
    scheduler: ReleaseScheduler = Depends(get_release_scheduler),
) -> BatchReleaseScheduler:
    return BatchReleaseScheduler(scheduler)


def get_release_processor(
    content_store: SqlContentStore = Depends(get_content_store),
    cache: AccessDecisionCache | None = Depends(get_access_cache),
) -> ReleaseProcessor:
    return ReleaseProcessor(content_store, cache=cache)


def require_admin_key(x_admin_key: str | None = Header(default=None)) -> None:
    """Admin routes: X-Admin-Key must match ADMIN_API_KEY when one is configured.

    Which roles may schedule releases is decided by the calling layer, not here.
    """
    if settings.admin_api_key and x_admin_key != settings.admin_api_key:
        raise HTTPException(status_code=401, detail="Invalid admin key")
