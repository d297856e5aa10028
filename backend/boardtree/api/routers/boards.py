from __future__ import annotations

from fastapi import APIRouter, Depends, status

from boardtree.api.deps import get_board_service
from boardtree.models.board import Board
from boardtree.schemas.board import BoardCreate, BoardMove, BoardOut, BoardTreeOut, MessageOut
from boardtree.services.boards import BoardService
from boardtree.services.tree_integrity import BoardNode


router = APIRouter()


def _board_to_out(board: Board) -> BoardOut:
    return BoardOut(
        id=board.id,
        name=board.name,
        parent_id=board.parent_id,
        created_at=board.created_at,
        updated_at=board.updated_at,
    )


def _node_to_out(node: BoardNode) -> BoardTreeOut:
    out = BoardTreeOut(**_board_to_out(node.board).model_dump())
    pending = [(out, node)]
    while pending:
        parent_out, parent_node = pending.pop()
        for child in parent_node.children:
            child_out = BoardTreeOut(**_board_to_out(child.board).model_dump())
            parent_out.children.append(child_out)
            pending.append((child_out, child))
    return out


@router.get("", response_model=list[BoardTreeOut])
async def list_boards(service: BoardService = Depends(get_board_service)) -> list[BoardTreeOut]:
    return [_node_to_out(node) for node in await service.list()]


@router.post("", response_model=BoardOut, status_code=status.HTTP_201_CREATED)
async def create_board(
    payload: BoardCreate,
    service: BoardService = Depends(get_board_service),
) -> BoardOut:
    board = await service.create(payload.name, payload.parent_id)
    return _board_to_out(board)


@router.get("/{board_id}", response_model=BoardTreeOut)
async def get_board(board_id: int, service: BoardService = Depends(get_board_service)) -> BoardTreeOut:
    return _node_to_out(await service.get_one(board_id))


@router.delete("/{board_id}", response_model=MessageOut)
async def delete_board(board_id: int, service: BoardService = Depends(get_board_service)) -> MessageOut:
    await service.remove(board_id)
    return MessageOut(message="Board deleted successfully")


@router.put("/{board_id}/move", response_model=BoardOut)
async def move_board(
    board_id: int,
    payload: BoardMove,
    service: BoardService = Depends(get_board_service),
) -> BoardOut:
    board = await service.move(board_id, payload.new_parent_id)
    return _board_to_out(board)
