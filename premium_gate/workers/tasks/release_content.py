"""
Celery periodic task: release premium content whose scheduled date has passed.
"""
import logging

from premium_gate.core.celery_app import celery_app
from premium_gate.core.config import settings
from premium_gate.db.session import SessionLocal
from premium_gate.services.access.cache import AccessDecisionCache
from premium_gate.services.releases.processor import ReleaseProcessor
from premium_gate.storage.sql import SqlContentStore

logger = logging.getLogger(__name__)


@celery_app.task(
    name="premium_gate.workers.tasks.release_content.process_releases",
    time_limit=300,
    soft_time_limit=290,
)
def process_releases(limit: int | None = None) -> dict:
    """Flip due items to free; returns counts for the beat log."""
    db = SessionLocal()
    try:
        cache = AccessDecisionCache() if settings.access_cache_enabled else None
        processor = ReleaseProcessor(SqlContentStore(db), cache=cache)
        result = processor.process_due(limit=limit)
        return {
            "released": result.released_count,
            "errors": [e.model_dump() for e in result.errors],
        }
    except Exception:
        db.rollback()
        logger.exception("process_releases_error")
        return {"released": 0, "errors": [], "error": "exception"}
    finally:
        db.close()
