"""
JSON logging for the API, the Celery worker and scripts.
Only whitelisted `extra` keys reach the payload.
"""
import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from premium_gate.core.config import settings

# Keys accepted in logger.*(..., extra={...})
EXTRA_FIELDS = (
    "content_id", "viewer_id", "zone", "reason", "release_date",
    "released_count", "error_count", "success_count", "failed_count", "limit",
    "request_id", "path", "method", "status_code", "latency_ms", "error",
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (name, getattr(record, name))
            for name in EXTRA_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str | None = None) -> None:
    """Replace root handlers: JSON to stderr, plus a rotating file when LOG_FILE is set."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(
            RotatingFileHandler(
                settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
            )
        )
    formatter = JsonFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel((level or settings.log_level).upper())
    # The app logs its own http_request line per request.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
