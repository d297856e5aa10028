from __future__ import annotations

import logging

from boardtree.config import settings
from boardtree.errors import CycleError, DepthExceededError, NotFoundError, SelfParentError, ValidationError
from boardtree.models.board import NAME_MAX_LENGTH
from boardtree.services.notifier import (
    BOARD_CREATED,
    BOARD_DELETED,
    BOARD_MOVED,
    Notifier,
    board_to_payload,
)
from boardtree.services.tree_integrity import BoardNode, BoardTree, build_hierarchy


logger = logging.getLogger(__name__)


def normalize_board_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Board name is required")
    if len(cleaned) > NAME_MAX_LENGTH:
        raise ValidationError(f"Board name must be at most {NAME_MAX_LENGTH} characters")
    return cleaned


class BoardService:
    """
    Creates, moves and deletes boards while keeping the forest acyclic and
    within ``max_depth`` levels.

    Every mutation reads a fresh snapshot, checks it and writes inside a single
    store transaction; clients are notified only once that transaction has
    committed.
    """

    def __init__(self, store, notifier: Notifier, *, max_depth: int | None = None) -> None:
        self.store = store
        self.notifier = notifier
        self.max_depth = max_depth if max_depth is not None else settings.MAX_BOARD_DEPTH

    async def _snapshot(self) -> BoardTree:
        return BoardTree(await self.store.list_all())

    async def _notify(self, event: str, payload: dict) -> None:
        # The write is already committed; each broadcast is attempted on its own.
        try:
            await self.notifier.publish(event, payload)
        except Exception:
            logger.exception("Failed to broadcast %s", event)
        try:
            await self.notifier.publish_update(event, payload)
        except Exception:
            logger.exception("Failed to broadcast board:update for %s", event)

    async def create(self, name: str | None, parent_id: int | None = None):
        name = normalize_board_name(name)
        async with self.store.transaction():
            if parent_id is not None:
                tree = await self._snapshot()
                if parent_id not in tree:
                    raise NotFoundError("Parent board not found")
                if tree.depth_of(parent_id) >= self.max_depth:
                    logger.info("Rejected board %r under %s: depth limit", name, parent_id)
                    raise DepthExceededError(f"Maximum board depth ({self.max_depth}) exceeded")
            board = await self.store.insert(name, parent_id)

        logger.info("Created board %s (parent=%s)", board.id, parent_id)
        await self._notify(BOARD_CREATED, board_to_payload(board))
        return board

    async def remove(self, board_id: int) -> None:
        async with self.store.transaction():
            tree = await self._snapshot()
            if board_id not in tree:
                raise NotFoundError("Board not found")
            removed = len(tree.subtree_ids(board_id))
            await self.store.remove(board_id)

        logger.info("Deleted board %s with %d descendant(s)", board_id, removed - 1)
        await self._notify(BOARD_DELETED, {"id": board_id})

    async def move(self, board_id: int, new_parent_id: int | None):
        async with self.store.transaction():
            tree = await self._snapshot()
            if board_id not in tree:
                raise NotFoundError("Board not found")

            if new_parent_id is not None:
                if new_parent_id not in tree:
                    raise NotFoundError("New parent board not found")
                if new_parent_id == board_id:
                    raise SelfParentError("Board cannot be its own parent")
                if tree.is_descendant(board_id, new_parent_id):
                    raise CycleError("Cannot move a board to its descendant")
                if tree.depth_of(new_parent_id) + tree.max_subtree_height(board_id) >= self.max_depth:
                    logger.info("Rejected move of board %s under %s: depth limit", board_id, new_parent_id)
                    raise DepthExceededError(
                        f"Moving this board would exceed maximum depth ({self.max_depth})"
                    )

            board = await self.store.set_parent(board_id, new_parent_id)
            if board is None:
                raise NotFoundError("Board not found")

        logger.info("Moved board %s under %s", board_id, new_parent_id)
        await self._notify(BOARD_MOVED, board_to_payload(board))
        return board

    async def list(self) -> list[BoardNode]:
        return build_hierarchy(await self.store.list_all())

    async def get_one(self, board_id: int) -> BoardNode:
        board = await self.store.get_by_id(board_id)
        if board is None:
            raise NotFoundError("Board not found")
        boards = await self.store.list_all()
        return BoardNode(board, build_hierarchy(boards, board_id))
