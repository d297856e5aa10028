from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from boardtree.services.notifier import NOTIFICATION, Notifier, RedisNotifier


logger = logging.getLogger(__name__)


def heartbeat_payload(now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)
    return {"message": f"Server notification: {now.isoformat()}"}


async def broadcast_heartbeat(notifier: Notifier | None = None) -> dict:
    payload = heartbeat_payload()
    await (notifier or RedisNotifier()).publish(NOTIFICATION, payload)
    return payload


async def run_heartbeat_loop(notifier: Notifier, interval: float) -> None:
    """In-process heartbeat for deployments without Redis and Celery beat."""
    while True:
        try:
            await broadcast_heartbeat(notifier)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Heartbeat broadcast failed")
        await asyncio.sleep(interval)
