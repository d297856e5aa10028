from __future__ import annotations

import asyncio
import json
import logging

from boardtree.config import settings
from boardtree.integrations.redis import create_redis_async
from boardtree.websocket.manager import manager


logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 2


async def _maybe_await(result) -> None:
    if asyncio.iscoroutine(result):
        await result


async def _close_quietly(pubsub, client, channel: str) -> None:
    if pubsub is not None:
        try:
            await pubsub.unsubscribe(channel)
            await _maybe_await(pubsub.close())
        except Exception:
            logger.debug("Ignoring error while closing pubsub", exc_info=True)
    if client is not None:
        closer = getattr(client, "aclose", None) or getattr(client, "close", None)
        try:
            if closer is not None:
                await _maybe_await(closer())
        except Exception:
            logger.debug("Ignoring error while closing redis client", exc_info=True)


async def relay_message(message: dict) -> bool:
    """Forward one pub/sub message to the websockets; returns False for non-data messages."""
    if message.get("type") != "message" or not message.get("data"):
        return False
    await manager.broadcast(json.loads(message["data"]))
    return True


async def start_board_event_listener() -> None:
    channel = settings.BOARD_EVENTS_CHANNEL
    while True:
        pubsub = None
        client = None
        try:
            client = create_redis_async()
            pubsub = client.pubsub()
            await pubsub.subscribe(channel)
            logger.info("Relaying board events from %s", channel)
            async for message in pubsub.listen():
                try:
                    await relay_message(message)
                except Exception:
                    logger.exception("Failed to relay board event")
        except asyncio.CancelledError:
            break
        except Exception:
            logger.exception("Redis listener failed; retrying in %ss", RETRY_DELAY_SECONDS)
        finally:
            await _close_quietly(pubsub, client, channel)
        await asyncio.sleep(RETRY_DELAY_SECONDS)
