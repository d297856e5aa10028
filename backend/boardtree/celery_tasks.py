from __future__ import annotations

import asyncio

from boardtree.celery_app import celery_app
from boardtree.jobs.heartbeat import broadcast_heartbeat as _broadcast_heartbeat


@celery_app.task(name="boardtree.celery_tasks.broadcast_heartbeat")
def broadcast_heartbeat() -> dict:
    return asyncio.run(_broadcast_heartbeat())
