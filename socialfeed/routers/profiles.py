"""Public profile lookup and profile picture upload."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from ..constants import PROFILE_MEDIA_FOLDER
from ..dependencies import get_current_claim, get_services
from ..errors import MediaMissing, SocialError
from ..schemas import ProfilePictureResponse, ProfileResponse
from ..services import ServiceContainer, SessionClaim

router = APIRouter(tags=["profiles"])


@router.get("/profile/{username}", response_model=ProfileResponse)
def profile_endpoint(username: str, services: ServiceContainer = Depends(get_services)) -> ProfileResponse:
    user = services.identity.get_profile(username)
    return ProfileResponse(username=user.username, profile_pic=user.profile_pic_url)


@router.post("/profile-pic", response_model=ProfilePictureResponse)
async def profile_picture_endpoint(
    media: UploadFile | None = File(None),
    claim: SessionClaim = Depends(get_current_claim),
    services: ServiceContainer = Depends(get_services),
) -> ProfilePictureResponse:
    if media is None or not (media.filename or "").strip():
        raise MediaMissing()

    reference = await services.media.upload(claim, media, folder=PROFILE_MEDIA_FOLDER)
    try:
        user = services.identity.set_profile_picture(claim.user_id, reference.url)
    except SocialError:
        await services.media.discard(reference)
        raise
    return ProfilePictureResponse(success=True, profile_pic=user.profile_pic_url)
