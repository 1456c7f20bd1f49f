"""Signup, login and session routes using a server-side cookie session."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from ..dependencies import (
    clear_session_cookie,
    get_optional_claim,
    get_services,
    get_session_token,
    set_session_cookie,
)
from ..schemas import AuthCheckResponse, AuthResponse, LoginRequest, SignupRequest, SuccessResponse, UserSummary
from ..services import ServiceContainer, SessionClaim

router = APIRouter(tags=["auth"])

logger = logging.getLogger(__name__)


def _user_summary(services: ServiceContainer, claim: SessionClaim) -> UserSummary:
    user = services.identity.get_by_username(claim.username)
    return UserSummary(username=claim.username, profile_pic=user.profile_pic_url if user else None)


@router.post("/signup", response_model=AuthResponse, response_model_exclude_none=True)
def signup_endpoint(
    payload: SignupRequest,
    response: Response,
    services: ServiceContainer = Depends(get_services),
) -> AuthResponse:
    claim, token = services.sessions.signup(
        payload.username,
        payload.password,
        phone=payload.phone,
        email=payload.email,
    )
    set_session_cookie(response, services.settings, token)
    return AuthResponse(success=True, user=UserSummary(username=claim.username))


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
def login_endpoint(
    payload: LoginRequest,
    response: Response,
    services: ServiceContainer = Depends(get_services),
) -> AuthResponse:
    claim, token = services.sessions.login(payload.username, payload.password)
    set_session_cookie(response, services.settings, token)
    logger.info("User %s logged in", claim.username)
    return AuthResponse(success=True, user=_user_summary(services, claim))


@router.get("/auth-check", response_model=AuthCheckResponse, response_model_exclude_none=True)
def auth_check_endpoint(claim: SessionClaim | None = Depends(get_optional_claim)) -> AuthCheckResponse:
    if claim is None:
        return AuthCheckResponse(logged_in=False)
    return AuthCheckResponse(logged_in=True, username=claim.username)


@router.post("/logout", response_model=SuccessResponse, response_model_exclude_none=True)
def logout_endpoint(
    response: Response,
    token: str | None = Depends(get_session_token),
    services: ServiceContainer = Depends(get_services),
) -> SuccessResponse:
    services.sessions.logout(token)
    clear_session_cookie(response, services.settings)
    return SuccessResponse(success=True)
