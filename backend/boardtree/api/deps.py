from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from boardtree.config import settings
from boardtree.db import get_db
from boardtree.services.board_store import BoardStore
from boardtree.services.boards import BoardService
from boardtree.services.notifier import LocalNotifier, Notifier, RedisNotifier
from boardtree.websocket.manager import manager


def get_notifier() -> Notifier:
    if settings.REDIS_ENABLED:
        return RedisNotifier()
    return LocalNotifier(manager)


def get_board_service(
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
) -> BoardService:
    return BoardService(BoardStore(db), notifier)
