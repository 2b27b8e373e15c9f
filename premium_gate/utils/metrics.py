"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
access_checks_total = Counter(
    "access_checks_total",
    "Total access decisions served",
    ["reason"],  # FREE_CONTENT, SUBSCRIPTION, TRIAL, ROLE, NONE
)

releases_scheduled_total = Counter(
    "releases_scheduled_total",
    "Total release scheduling attempts",
    ["outcome"],  # scheduled, unscheduled, not_found, invalid_date, store_error
)

content_released_total = Counter(
    "content_released_total",
    "Total content items flipped from gated to free",
)

content_release_errors_total = Counter(
    "content_release_errors_total",
    "Total per-item failures during release processing",
)

# Histograms
release_run_duration_seconds = Histogram(
    "release_run_duration_seconds",
    "Release processor run duration",
    buckets=[0.1, 0.5, 1, 5, 10, 30, 60, 120],
)


# Metrics endpoint router
router = APIRouter()


@router.get("/metrics")
def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
