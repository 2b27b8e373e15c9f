"""
Content gating (internal library).
Decision (evaluate) and presentation (generate_preview) are separate; stores and jobs
live in premium_gate.services.
"""
from premium_gate.gating.access import evaluate, gating_state
from premium_gate.gating.preview import generate_preview
from premium_gate.gating.models import (
    AccessDecision,
    AccessReason,
    ContentGateMetadata,
    GatingState,
    PreviewResult,
    SubscriptionInfo,
    SubscriptionStatus,
    Viewer,
    ViewerRole,
    Zone,
    ZoneGate,
)

__all__ = [
    "AccessDecision",
    "AccessReason",
    "ContentGateMetadata",
    "GatingState",
    "PreviewResult",
    "SubscriptionInfo",
    "SubscriptionStatus",
    "Viewer",
    "ViewerRole",
    "Zone",
    "ZoneGate",
    "evaluate",
    "gating_state",
    "generate_preview",
]
