"""Direct message routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..dependencies import get_current_claim, get_services
from ..errors import Forbidden
from ..schemas import DirectMessageCreate, DirectMessageResponse, DirectMessageSendResponse
from ..services import ServiceContainer, SessionClaim

router = APIRouter(prefix="/dm", tags=["messages"])


@router.get("/{user_a}/{user_b}", response_model=list[DirectMessageResponse])
def thread_endpoint(
    user_a: str,
    user_b: str,
    claim: SessionClaim = Depends(get_current_claim),
    services: ServiceContainer = Depends(get_services),
) -> list[DirectMessageResponse]:
    history = services.messages.history(user_a, user_b, viewer=claim)
    return [DirectMessageResponse.model_validate(message) for message in history]


@router.post("/{user_a}/{user_b}", response_model=DirectMessageSendResponse)
def send_endpoint(
    user_a: str,
    user_b: str,
    payload: DirectMessageCreate,
    claim: SessionClaim = Depends(get_current_claim),
    services: ServiceContainer = Depends(get_services),
) -> DirectMessageSendResponse:
    # The sender is whoever owns the session; the path only names the other side.
    if claim.username == user_a:
        recipient = user_b
    elif claim.username == user_b:
        recipient = user_a
    else:
        raise Forbidden("You can only send messages as yourself")

    message = services.messages.send(claim, recipient, payload.message)
    return DirectMessageSendResponse(success=True, dm=DirectMessageResponse.model_validate(message))
