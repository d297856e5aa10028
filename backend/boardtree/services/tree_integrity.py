from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from boardtree.errors import NotFoundError, ValidationError


@dataclass
class BoardNode:
    """A board together with its transient, creation-ordered children."""

    board: Any
    children: list[BoardNode] = field(default_factory=list)


def _index_children(boards: Iterable[Any]) -> dict[int | None, list[Any]]:
    index: dict[int | None, list[Any]] = defaultdict(list)
    for board in boards:
        index[board.parent_id].append(board)
    return index


def build_hierarchy(boards: Sequence[Any], parent_id: int | None = None) -> list[BoardNode]:
    """
    Assemble the boards whose ``parent_id`` equals ``parent_id`` into nodes, each
    carrying its own subtree as ``children``.

    Input order is kept at every level, so a list ordered by creation time yields
    children in creation order. Boards that cannot be reached from ``parent_id``
    (dangling parent links, parent cycles) are left out.
    """
    index = _index_children(boards)
    roots = [BoardNode(board) for board in index.get(parent_id, [])]
    seen: set[int | None] = {parent_id}
    seen.update(node.board.id for node in roots)

    stack = list(roots)
    while stack:
        node = stack.pop()
        for child in index.get(node.board.id, []):
            if child.id in seen:
                continue
            seen.add(child.id)
            child_node = BoardNode(child)
            node.children.append(child_node)
            stack.append(child_node)
    return roots


def flatten_hierarchy(nodes: Sequence[BoardNode]) -> list[Any]:
    """Pre-order walk of a hierarchy back into a flat list of boards."""
    flat: list[Any] = []
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        flat.append(node.board)
        stack.extend(reversed(node.children))
    return flat


class BoardTree:
    """
    Read-only view over a snapshot of every board, used to check tree invariants
    before a mutation.

    Depth is counted in levels: a root board is on level 1, its children on
    level 2 and so on. ``depth_of(None)`` is 0.
    """

    def __init__(self, boards: Iterable[Any]) -> None:
        self._boards: dict[int, Any] = {board.id: board for board in boards}
        self._children = _index_children(self._boards.values())

    def __contains__(self, board_id: object) -> bool:
        return board_id in self._boards

    def __len__(self) -> int:
        return len(self._boards)

    def get(self, board_id: int) -> Any | None:
        return self._boards.get(board_id)

    def children_of(self, parent_id: int | None) -> list[Any]:
        return list(self._children.get(parent_id, []))

    def depth_of(self, board_id: int | None) -> int:
        if board_id is None:
            return 0
        board = self._boards.get(board_id)
        if board is None:
            raise NotFoundError("Board not found")

        depth = 0
        visited: set[int] = set()
        while True:
            if board.id in visited:
                raise ValidationError(f"Board {board.id} is part of a parent cycle")
            visited.add(board.id)
            depth += 1
            if board.parent_id is None:
                return depth
            parent = self._boards.get(board.parent_id)
            if parent is None:
                raise ValidationError("parent reference to nonexistent board")
            board = parent

    def is_descendant(self, ancestor_id: int, target_id: int) -> bool:
        # A board counts as its own descendant.
        if ancestor_id == target_id:
            return True
        seen = {ancestor_id}
        stack = [ancestor_id]
        while stack:
            current = stack.pop()
            for child in self._children.get(current, []):
                if child.id == target_id:
                    return True
                if child.id not in seen:
                    seen.add(child.id)
                    stack.append(child.id)
        return False

    def max_subtree_height(self, root_id: int) -> int:
        """Number of levels below ``root_id``; 0 for a leaf."""
        height = 0
        seen = {root_id}
        stack = [(root_id, 0)]
        while stack:
            current, level = stack.pop()
            height = max(height, level)
            for child in self._children.get(current, []):
                if child.id not in seen:
                    seen.add(child.id)
                    stack.append((child.id, level + 1))
        return height

    def subtree_ids(self, root_id: int) -> list[int]:
        """``root_id`` followed by all of its descendants, pre-order."""
        ids: list[int] = []
        seen: set[int] = set()
        stack = [root_id]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            ids.append(current)
            stack.extend(child.id for child in reversed(self._children.get(current, [])))
        return ids
