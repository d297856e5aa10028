from boardtree.models.board import Board

__all__ = [
    "Board",
]
