"""Pydantic schemas for public profiles."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProfileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    profile_pic: str | None = Field(default=None, alias="profilePic")


class ProfilePictureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    profile_pic: str | None = Field(default=None, alias="profilePic")
