"""
Admin API: schedule / unschedule releases, batch scheduling, pending releases,
manual release run. Role checks (admin / coach) belong to the calling layer.
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from premium_gate.api.dependencies import (
    get_batch_scheduler,
    get_release_processor,
    get_release_scheduler,
    require_admin_key,
)
from premium_gate.gating.errors import (
    InvalidReleaseDate,
    NotFound,
    TransientStoreError,
    ValidationError,
)
from premium_gate.schemas.premium import (
    BatchScheduleIn,
    BatchScheduleOut,
    ProcessReleasesOut,
    ReleaseErrorOut,
    ScheduledReleaseOut,
    ScheduleReleaseIn,
)
from premium_gate.services.releases.processor import ReleaseProcessor
from premium_gate.services.releases.scheduler import BatchReleaseScheduler, ReleaseScheduler

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin_key)])


# ---------- Scheduling ----------
@router.post("/content/{content_id}/schedule", response_model=ScheduledReleaseOut)
def schedule_release(
    content_id: str,
    payload: ScheduleReleaseIn,
    scheduler: ReleaseScheduler = Depends(get_release_scheduler),
) -> ScheduledReleaseOut:
    try:
        scheduled = scheduler.schedule(content_id, payload.release_date)
    except InvalidReleaseDate as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return ScheduledReleaseOut(**scheduled.model_dump())


@router.delete("/content/{content_id}/schedule")
def unschedule_release(
    content_id: str,
    scheduler: ReleaseScheduler = Depends(get_release_scheduler),
) -> dict:
    try:
        scheduler.unschedule(content_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"ok": True, "content_id": content_id}


@router.post("/content/schedule/batch", response_model=BatchScheduleOut)
def batch_schedule_release(
    payload: BatchScheduleIn,
    batch: BatchReleaseScheduler = Depends(get_batch_scheduler),
) -> BatchScheduleOut:
    try:
        result = batch.schedule_batch(payload.content_ids, payload.release_date)
    except (InvalidReleaseDate, ValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BatchScheduleOut(
        success_count=result.success_count,
        failed_count=len(result.failed),
        failed=result.failed,
    )


@router.get("/scheduled", response_model=list[ScheduledReleaseOut])
def list_scheduled_releases(
    limit: int | None = Query(None),
    scheduler: ReleaseScheduler = Depends(get_release_scheduler),
) -> list[ScheduledReleaseOut]:
    try:
        pending = scheduler.list_pending(limit)
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return [ScheduledReleaseOut(**s.model_dump()) for s in pending]


# ---------- Release processing ----------
@router.post("/releases/process", response_model=ProcessReleasesOut)
def process_releases(
    limit: int | None = Query(None, ge=1),
    processor: ReleaseProcessor = Depends(get_release_processor),
) -> ProcessReleasesOut:
    try:
        result = processor.process_due(limit=limit)
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return ProcessReleasesOut(
        released_count=result.released_count,
        errors=[ReleaseErrorOut(content_id=e.content_id, message=e.message) for e in result.errors],
    )
