from fastapi import APIRouter, Depends, Response
import redis
from sqlalchemy import text
from sqlalchemy.orm import Session

from premium_gate.core.config import settings
from premium_gate.db.session import get_db


router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Liveness probe: 200 while the process serves requests."""
    return {"status": "ok"}


@router.get("/ready")
def readiness(response: Response, db: Session = Depends(get_db)) -> dict:
    """Readiness probe: database always, Redis only when the decision cache is on. 503 on any failure."""
    checks = {}
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = str(e)

    if settings.access_cache_enabled:
        try:
            redis.Redis.from_url(settings.redis_url, decode_responses=True).ping()
            checks["cache"] = "ok"
        except redis.RedisError as e:
            checks["cache"] = str(e)
    else:
        checks["cache"] = "disabled"

    if any(value not in ("ok", "disabled") for value in checks.values()):
        response.status_code = 503
        return {"status": "not_ready", "checks": checks}
    return {"status": "ready", "checks": checks}
