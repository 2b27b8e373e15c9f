"""
Celery application: broker and result backend from settings.
Tasks are in premium_gate.workers.tasks (release_content).
"""
from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging

from premium_gate.core.config import settings
from premium_gate.core.logging import configure_logging

celery_app = Celery(
    "premium_gate",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "premium_gate.workers.tasks.release_content",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_track_started=True,
    task_time_limit=600,
    result_expires=86400,
    beat_schedule={
        "process-premium-releases": {
            "task": "premium_gate.workers.tasks.release_content.process_releases",
            "schedule": crontab(minute=f"*/{settings.release_beat_minutes}"),
        },
    },
)

celery_app.autodiscover_tasks(["premium_gate.workers.tasks"])


@setup_logging.connect
def configure_worker_logging(**kwargs) -> None:
    configure_logging()
