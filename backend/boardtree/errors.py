from __future__ import annotations


class BoardError(Exception):
    """Base class for errors reported to API clients as ``{"error": message}``."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BoardError):
    status_code = 400


class NotFoundError(BoardError):
    status_code = 404


class SelfParentError(BoardError):
    status_code = 400


class CycleError(BoardError):
    status_code = 400


class DepthExceededError(BoardError):
    status_code = 400


class StoreError(BoardError):
    status_code = 500
