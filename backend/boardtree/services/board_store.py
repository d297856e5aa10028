from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from boardtree.config import settings
from boardtree.errors import StoreError
from boardtree.models.board import MAX_BOARD_ID, Board


class BoardStore:
    """Thin persistence facade over the ``boards`` table."""

    def __init__(self, db: AsyncSession, *, isolation_level: str | None = None) -> None:
        self._db = db
        self._isolation_level = isolation_level or settings.DB_ISOLATION_LEVEL

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Run the enclosed reads and writes as one transaction, committed on exit."""
        if self._db.in_transaction():
            # Close the autobegun read transaction so the isolation level can be applied.
            await self._db.rollback()
        try:
            async with self._db.begin():
                await self._db.connection(execution_options={"isolation_level": self._isolation_level})
                yield
        except SQLAlchemyError as exc:
            raise StoreError("Board store operation failed") from exc

    async def insert(self, name: str, parent_id: int | None) -> Board:
        board = Board(name=name, parent_id=parent_id)
        try:
            self._db.add(board)
            await self._db.flush()
            await self._db.refresh(board)
        except SQLAlchemyError as exc:
            raise StoreError("Failed to create board") from exc
        return board

    async def remove(self, board_id: int) -> None:
        # Descendants go with the row through ON DELETE CASCADE.
        try:
            await self._db.execute(delete(Board).where(Board.id == board_id))
        except SQLAlchemyError as exc:
            raise StoreError("Failed to delete board") from exc

    async def set_parent(self, board_id: int, parent_id: int | None) -> Board | None:
        try:
            await self._db.execute(
                update(Board)
                .where(Board.id == board_id)
                .values(parent_id=parent_id, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            stmt = select(Board).where(Board.id == board_id).execution_options(populate_existing=True)
            return (await self._db.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to move board") from exc

    async def get_by_id(self, board_id: int) -> Board | None:
        if not 0 < board_id <= MAX_BOARD_ID:
            return None
        try:
            return (await self._db.execute(select(Board).where(Board.id == board_id))).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load board") from exc

    async def list_all(self) -> list[Board]:
        try:
            boards = (await self._db.execute(select(Board).order_by(Board.created_at, Board.id))).scalars().all()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load boards") from exc
        return list(boards)
