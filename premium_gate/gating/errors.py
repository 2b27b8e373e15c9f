"""
Error taxonomy for gating and release scheduling.

Single-item operations raise these; batch and processor operations collect them per item.
"""


class GatingError(Exception):
    """Base class for all gating errors."""


class NotFound(GatingError):
    """Content or user id does not resolve."""


class ContentNotFound(NotFound):
    def __init__(self, content_id: str, zone: str | None = None):
        self.content_id = content_id
        self.zone = zone
        where = f" in zone {zone}" if zone else ""
        super().__init__(f"Content {content_id} not found{where}")


class InvalidReleaseDate(GatingError):
    """Release date is unparseable or not strictly in the future."""

    def __init__(self, value, message: str = "Release date must be a valid timestamp in the future"):
        self.value = value
        super().__init__(f"{message}: {value!r}")


class ValidationError(GatingError):
    """Malformed batch input (empty id list, oversized batch)."""


class TransientStoreError(GatingError):
    """Underlying store unavailable while handling a single item."""

    def __init__(self, message: str, content_id: str | None = None):
        self.content_id = content_id
        super().__init__(message)
