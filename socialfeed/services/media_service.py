"""Media reference store: metadata about uploads whose bytes live on the media host."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from ..constants import MediaType
from ..database import SessionFactory
from ..errors import NotAuthenticated, SocialError, UpstreamFailure
from ..models import MediaAsset
from .session_service import SessionClaim
from .spaces_service import MediaUploadResult

logger = logging.getLogger(__name__)


class MediaHost(Protocol):
    """External service that stores uploaded bytes and serves them by URL."""

    async def upload(self, file: UploadFile, *, folder: str) -> MediaUploadResult: ...

    async def discard(self, key: str) -> None: ...


@dataclass(frozen=True, slots=True)
class MediaReference:
    asset_id: UUID | None
    url: str
    key: str
    content_type: str


def classify_media_type(content_type: str | None) -> MediaType:
    """``video`` when the content type starts with ``video/``, otherwise ``image``."""

    if (content_type or "").strip().lower().startswith("video/"):
        return MediaType.VIDEO
    return MediaType.IMAGE


class MediaStore:
    def __init__(self, session_factory: SessionFactory, host: MediaHost) -> None:
        self._session_factory = session_factory
        self._host = host

    async def upload(self, claim: SessionClaim | None, file: UploadFile, *, folder: str) -> MediaReference:
        """Send ``file`` to the media host on behalf of ``claim`` and record its metadata.

        The claim is checked before any bytes leave the server. If the metadata
        cannot be stored afterwards, the uploaded object is removed again.
        """

        if claim is None:
            raise NotAuthenticated()

        result = await self._host.upload(file, folder=folder)
        try:
            return self.record(claim, result, folder=folder)
        except SocialError:
            await self._discard_remote(result.key)
            raise

    def record(self, claim: SessionClaim, result: MediaUploadResult, *, folder: str | None = None) -> MediaReference:
        asset = MediaAsset(
            owner_id=claim.user_id,
            owner_username=claim.username,
            key=result.key,
            url=result.url,
            content_type=result.content_type,
            folder=folder,
        )
        with self._session_factory() as db:
            db.add(asset)
            try:
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Failed to persist media metadata for %s", result.key)
                raise UpstreamFailure("Failed to persist media metadata") from exc
            db.refresh(asset)
            return MediaReference(
                asset_id=asset.id,
                url=asset.url,
                key=asset.key,
                content_type=asset.content_type,
            )

    async def discard(self, reference: MediaReference) -> None:
        """Forget an upload nothing ended up pointing at. Failures are logged, not raised."""

        if reference.asset_id is not None:
            with self._session_factory() as db:
                try:
                    db.execute(delete(MediaAsset).where(MediaAsset.id == reference.asset_id))
                    db.commit()
                except SQLAlchemyError:
                    db.rollback()
                    logger.warning("Failed to delete media metadata %s", reference.asset_id, exc_info=True)
        await self._discard_remote(reference.key)

    async def _discard_remote(self, key: str) -> None:
        try:
            await self._host.discard(key)
        except UpstreamFailure:
            logger.warning("Orphaned upload left on media host: %s", key)


__all__ = ["MediaHost", "MediaReference", "MediaStore", "classify_media_type"]
