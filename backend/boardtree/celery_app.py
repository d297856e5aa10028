from __future__ import annotations

from celery import Celery

from boardtree.config import settings


celery_app = Celery(
    "boardtree",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["boardtree.celery_tasks"],
)

celery_app.conf.timezone = "UTC"
celery_app.conf.task_serializer = "json"
celery_app.conf.result_serializer = "json"
celery_app.conf.accept_content = ["json"]
celery_app.conf.task_ignore_result = True

celery_app.conf.beat_schedule = {
    "broadcast-heartbeat": {
        "task": "boardtree.celery_tasks.broadcast_heartbeat",
        "schedule": settings.HEARTBEAT_INTERVAL_SECONDS,
    },
}
