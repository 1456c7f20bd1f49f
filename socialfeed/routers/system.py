"""System-level routes for diagnostics."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..dependencies import get_services
from ..services import ServiceContainer

router = APIRouter(tags=["system"])


@router.get("/api")
def api_info(services: ServiceContainer = Depends(get_services)) -> dict[str, str]:
    return {"service": services.settings.app_name, "version": services.settings.api_version}


@router.get("/health")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
