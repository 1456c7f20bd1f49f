"""Pydantic schemas for direct messages."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DirectMessageCreate(BaseModel):
    message: str | None = Field(default=None, max_length=5000)


class DirectMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    from_username: str = Field(..., alias="from")
    to_username: str = Field(..., alias="to")
    text: str
    timestamp: datetime


class DirectMessageSendResponse(BaseModel):
    success: bool
    dm: DirectMessageResponse | None = None
