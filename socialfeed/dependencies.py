"""FastAPI dependencies resolving services and the caller's session claim."""
from __future__ import annotations

from fastapi import Depends, Request, Response

from .config import Settings
from .errors import NotAuthenticated
from .services import ServiceContainer, SessionClaim


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def set_session_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=int(settings.session_ttl.total_seconds()),
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )


def get_session_token(request: Request, services: ServiceContainer = Depends(get_services)) -> str | None:
    return request.cookies.get(services.settings.session_cookie_name) or None


def get_optional_claim(
    response: Response,
    token: str | None = Depends(get_session_token),
    services: ServiceContainer = Depends(get_services),
) -> SessionClaim | None:
    """Return the caller's claim when the session cookie is valid."""

    claim = services.sessions.check(token)
    if claim is not None and token and services.settings.session_rolling:
        if services.sessions.refresh(token):
            set_session_cookie(response, services.settings, token)
    return claim


def get_current_claim(claim: SessionClaim | None = Depends(get_optional_claim)) -> SessionClaim:
    """Resolve the authenticated claim or fail with ``NotAuthenticated``."""

    if claim is None:
        raise NotAuthenticated()
    return claim


__all__ = [
    "clear_session_cookie",
    "get_current_claim",
    "get_optional_claim",
    "get_services",
    "get_session_token",
    "set_session_cookie",
]
