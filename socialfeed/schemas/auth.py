"""Pydantic schemas for signup, login and session endpoints."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    # Presence is checked by the session manager so missing fields get the usual envelope.
    username: str | None = Field(default=None, max_length=150)
    password: str | None = Field(default=None, max_length=128)
    phone: str | None = Field(default=None, max_length=64)
    email: str | None = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class UserSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    profile_pic: str | None = Field(default=None, alias="profilePic")


class AuthResponse(BaseModel):
    success: bool
    user: UserSummary | None = None
    message: str | None = None


class AuthCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    logged_in: bool = Field(..., alias="loggedIn")
    username: str | None = None


class SuccessResponse(BaseModel):
    success: bool
    message: str | None = None
