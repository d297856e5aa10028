from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

from boardtree.config import settings
from boardtree.integrations.redis import get_redis_sync
from boardtree.websocket.manager import ConnectionManager


BOARD_CREATED = "board:created"
BOARD_DELETED = "board:deleted"
BOARD_MOVED = "board:moved"
BOARD_UPDATE = "board:update"
NOTIFICATION = "notification"


def board_to_payload(board) -> dict:
    return {
        "id": board.id,
        "name": board.name,
        "parent_id": board.parent_id,
        "created_at": board.created_at.isoformat() if board.created_at else None,
        "updated_at": board.updated_at.isoformat() if board.updated_at else None,
    }


def update_envelope(event_type: str, payload: dict) -> dict:
    return {
        "type": event_type,
        "payload": payload,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def event_message(event: str, payload: dict) -> dict:
    return {"event": event, "data": payload}


class Notifier:
    """
    Broadcasts board events to every connected client.

    Each mutation is announced with two calls: ``publish`` for the specific event
    and ``publish_update`` for the generic ``board:update`` clients use to
    invalidate their cached tree.
    """

    async def publish(self, event: str, payload: dict) -> None:
        raise NotImplementedError

    async def publish_update(self, event_type: str, payload: dict) -> None:
        await self.publish(BOARD_UPDATE, update_envelope(event_type, payload))


class RedisNotifier(Notifier):
    """Publishes on the Redis channel that every API process relays to its websockets."""

    def __init__(self, channel: str | None = None) -> None:
        self.channel = channel or settings.BOARD_EVENTS_CHANNEL

    async def publish(self, event: str, payload: dict) -> None:
        client = get_redis_sync()
        message = json.dumps(event_message(event, payload))
        await asyncio.to_thread(client.publish, self.channel, message)


class LocalNotifier(Notifier):
    """Sends straight to this process's websockets; used when Redis is disabled."""

    def __init__(self, connections: ConnectionManager) -> None:
        self.connections = connections

    async def publish(self, event: str, payload: dict) -> None:
        await self.connections.broadcast(event_message(event, payload))
