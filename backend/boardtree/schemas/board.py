from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class BoardOut(BaseModel):
    id: int
    name: str
    parent_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BoardTreeOut(BoardOut):
    children: list[BoardTreeOut] = []


class BoardCreate(BaseModel):
    # Blank and missing names are rejected by the service with a 400, not by pydantic with a 422.
    name: str | None = None
    parent_id: int | None = None


class BoardMove(BaseModel):
    new_parent_id: int | None = None


class MessageOut(BaseModel):
    message: str
