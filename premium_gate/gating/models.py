"""
Gating DTOs: evaluate() inputs (ContentGateMetadata, Viewer, SubscriptionInfo),
AccessDecision, PreviewResult, and the release scheduling results.
"""
from __future__ import annotations

import math
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from premium_gate.utils.time import as_utc


class Zone(str, Enum):
    READ = "READ"
    COACH = "COACH"
    PLAYER = "PLAYER"
    PARENT = "PARENT"
    SERIES = "SERIES"


class ViewerRole(str, Enum):
    FREE = "FREE"
    PLAYER = "PLAYER"
    COACH = "COACH"
    PARENT = "PARENT"
    ADMIN = "ADMIN"


class SubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CANCELED = "CANCELED"
    PAST_DUE = "PAST_DUE"
    TRIALING = "TRIALING"
    INCOMPLETE = "INCOMPLETE"


class AccessReason(str, Enum):
    FREE_CONTENT = "FREE_CONTENT"
    SUBSCRIPTION = "SUBSCRIPTION"
    PREMIUM_UNTIL = "PREMIUM_UNTIL"
    TRIAL = "TRIAL"
    ROLE = "ROLE"
    NONE = "NONE"


class GatingState(str, Enum):
    GATED_SCHEDULED = "GATED_SCHEDULED"
    GATED_PERMANENT = "GATED_PERMANENT"
    GATED_NO_SCHEDULE = "GATED_NO_SCHEDULE"
    FREE = "FREE"


GRANTING_STATUSES = frozenset({SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING})


# ----- evaluate() inputs -----


class ZoneGate(BaseModel):
    zone: Zone
    visible: bool = True
    requires_subscription: bool = False
    free_after_date: datetime | None = None

    model_config = {"frozen": True}

    @field_validator("free_after_date")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class ContentGateMetadata(BaseModel):
    """Minimal gating facts for one content item."""

    content_id: str
    is_premium: bool = False
    premium_release_date: datetime | None = None
    is_permanent_premium: bool = False
    zones: tuple[ZoneGate, ...] = ()

    model_config = {"frozen": True}

    @field_validator("premium_release_date")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    @property
    def visible_zones(self) -> tuple[ZoneGate, ...]:
        return tuple(z for z in self.zones if z.visible)

    def zone_setting(self, zone: Zone) -> ZoneGate | None:
        """Visible setting for the zone; hidden zones are never returned."""
        for z in self.zones:
            if z.zone == zone and z.visible:
                return z
        return None


class Viewer(BaseModel):
    id: str | None = None
    role: ViewerRole = ViewerRole.FREE

    model_config = {"frozen": True}

    @property
    def is_anonymous(self) -> bool:
        return self.id is None


class SubscriptionInfo(BaseModel):
    user_id: str
    plan_id: str
    status: SubscriptionStatus
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool = False
    id: str | None = None

    model_config = {"frozen": True}

    @field_validator("current_period_start", "current_period_end")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    def grants_access(self, now: datetime) -> bool:
        if self.status not in GRANTING_STATUSES:
            return False
        return self.current_period_start <= now <= self.current_period_end

    def days_remaining(self, now: datetime) -> int:
        seconds = (self.current_period_end - now).total_seconds()
        return max(0, math.ceil(seconds / 86400))


# ----- access decision (pure logic, no I/O) -----


class AccessDecision(BaseModel):
    has_access: bool
    reason: AccessReason
    requires_upgrade: bool = False
    release_date: datetime | None = Field(
        None,
        description="When gated content becomes free; echoed on denial so callers can show the date",
    )
    trial_days_left: int | None = None
    upgrade_url: str | None = None
    preview_words: int | None = Field(
        None,
        description="Preview budget in words when access is denied",
    )

    model_config = {"frozen": True}


class PreviewResult(BaseModel):
    preview_text: str
    preview_html: str
    word_count: int = Field(..., description="Words in the full content")
    preview_word_count: int
    estimated_read_time: int = Field(..., description="Minutes, from the full word count")
    truncated: bool

    model_config = {"frozen": True}


# ----- release scheduling -----


class ScheduledRelease(BaseModel):
    content_id: str
    scheduled_for: datetime
    released: bool = False
    released_at: datetime | None = None
    title: str | None = None
    slug: str | None = None
    days_until_release: int | None = None

    model_config = {"frozen": True}


class BatchScheduleResult(BaseModel):
    success_count: int = 0
    failed: list[str] = Field(default_factory=list)


class ReleaseError(BaseModel):
    content_id: str
    message: str


class ReleaseRunResult(BaseModel):
    released_count: int = 0
    errors: list[ReleaseError] = Field(default_factory=list)
