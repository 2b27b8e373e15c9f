from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from premium_gate.gating.models import AccessReason, SubscriptionStatus


class AccessCheckOut(BaseModel):
    content_id: str
    has_access: bool
    reason: AccessReason
    requires_upgrade: bool
    release_date: datetime | None = None
    trial_days_left: int | None = None
    upgrade_url: str | None = None
    preview_words: int | None = None


class BulkAccessIn(BaseModel):
    content_ids: list[str] = Field(..., min_length=1)
    viewer_id: str | None = None
    role: str | None = None
    zone: str | None = None


class BulkAccessItemOut(BaseModel):
    content_id: str
    has_access: bool = False
    reason: AccessReason | None = None
    requires_upgrade: bool = False
    error: bool = False  # content id not found or unreadable


class PreviewOut(BaseModel):
    content_id: str
    has_access: bool
    reason: AccessReason
    preview_text: str
    preview_html: str
    word_count: int
    preview_word_count: int
    estimated_read_time: int
    truncated: bool
    release_date: datetime | None = None
    upgrade_url: str | None = None


class SubscriptionOut(BaseModel):
    id: str | None = None
    plan_id: str
    status: SubscriptionStatus
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool
    is_active: bool
    days_remaining: int


class ScheduleReleaseIn(BaseModel):
    # Kept as a raw string so an unparseable value reaches the scheduler and fails as InvalidReleaseDate.
    release_date: str


class BatchScheduleIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content_ids: list[str]
    release_date: str


class ScheduledReleaseOut(BaseModel):
    content_id: str
    title: str | None = None
    slug: str | None = None
    scheduled_for: datetime
    released: bool
    released_at: datetime | None = None
    days_until_release: int | None = None


class BatchScheduleOut(BaseModel):
    success_count: int
    failed_count: int
    failed: list[str]


class ReleaseErrorOut(BaseModel):
    content_id: str
    message: str


class ProcessReleasesOut(BaseModel):
    released_count: int
    errors: list[ReleaseErrorOut]
