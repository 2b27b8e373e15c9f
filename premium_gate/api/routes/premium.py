"""
Viewer-facing gating API: access check, preview, bulk access check, subscription view.
Viewer identity comes from the calling layer (viewer_id / role query params).
"""
from fastapi import APIRouter, Depends, HTTPException

from premium_gate.api.dependencies import get_access_service, get_subscription_store
from premium_gate.gating.config import get_bulk_access_max_ids
from premium_gate.gating.errors import NotFound, TransientStoreError
from premium_gate.gating.models import Viewer, ViewerRole, Zone
from premium_gate.schemas.premium import (
    AccessCheckOut,
    BulkAccessIn,
    BulkAccessItemOut,
    PreviewOut,
    SubscriptionOut,
)
from premium_gate.services.access.service import AccessService
from premium_gate.services.subscriptions.service import SubscriptionResolver
from premium_gate.storage.sql import SqlSubscriptionStore


router = APIRouter(prefix="/premium", tags=["premium"])


@router.get("/content/{content_id}/access", response_model=AccessCheckOut)
def check_content_access(
    content_id: str,
    viewer_id: str | None = None,
    role: ViewerRole = ViewerRole.FREE,
    zone: Zone | None = None,
    service: AccessService = Depends(get_access_service),
) -> AccessCheckOut:
    viewer = Viewer(id=viewer_id, role=role)
    try:
        decision = service.check(content_id, viewer, zone=zone)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return AccessCheckOut(content_id=content_id, **decision.model_dump())


@router.get("/content/{content_id}/preview", response_model=PreviewOut)
def get_content_preview(
    content_id: str,
    viewer_id: str | None = None,
    role: ViewerRole = ViewerRole.FREE,
    zone: Zone | None = None,
    service: AccessService = Depends(get_access_service),
) -> PreviewOut:
    """Preview for denied viewers; viewers with access get the whole text back."""
    viewer = Viewer(id=viewer_id, role=role)
    try:
        decision, preview = service.preview(content_id, viewer, zone=zone)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return PreviewOut(
        content_id=content_id,
        has_access=decision.has_access,
        reason=decision.reason,
        release_date=decision.release_date,
        upgrade_url=decision.upgrade_url,
        **preview.model_dump(),
    )


@router.post("/content/access/bulk", response_model=list[BulkAccessItemOut])
def check_bulk_content_access(
    payload: BulkAccessIn,
    service: AccessService = Depends(get_access_service),
) -> list[BulkAccessItemOut]:
    max_ids = get_bulk_access_max_ids()
    if len(payload.content_ids) > max_ids:
        raise HTTPException(status_code=400, detail=f"At most {max_ids} content ids per request")
    try:
        role = ViewerRole(payload.role.upper()) if payload.role else ViewerRole.FREE
        zone = Zone(payload.zone.upper()) if payload.zone else None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    viewer = Viewer(id=payload.viewer_id, role=role)
    try:
        results = service.check_many(payload.content_ids, viewer, zone=zone)
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))

    out = []
    for content_id, decision in results:
        if decision is None:
            out.append(BulkAccessItemOut(content_id=content_id, error=True))
            continue
        out.append(
            BulkAccessItemOut(
                content_id=content_id,
                has_access=decision.has_access,
                reason=decision.reason,
                requires_upgrade=decision.requires_upgrade,
            )
        )
    return out


@router.get("/subscription/{user_id}", response_model=SubscriptionOut | None)
def get_user_subscription(
    user_id: str,
    store: SqlSubscriptionStore = Depends(get_subscription_store),
) -> SubscriptionOut | None:
    try:
        return SubscriptionResolver(store).describe(user_id)
    except TransientStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
