"""DigitalOcean Spaces integration used as the external media host."""
from __future__ import annotations

import logging
import mimetypes
import os
import re
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable
from urllib.parse import urlparse

from boto3.session import Session
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from ..config import MissingSecretError, is_placeholder, require_secret
from ..constants import ALLOWED_MEDIA_EXTENSIONS
from ..errors import InvalidInput, MediaMissing, UpstreamFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpacesConfig:
    """Runtime configuration extracted from environment variables."""

    key: str
    secret: str
    region: str
    bucket: str
    api_endpoint: str
    public_endpoint: str


@dataclass(frozen=True)
class MediaUploadResult:
    """What the media host hands back once it has accepted the bytes."""

    url: str
    key: str
    content_type: str


class SpacesConfigurationError(RuntimeError):
    """Raised when required DigitalOcean Spaces settings are missing or invalid."""


SPACES_ENV_VARS: tuple[str, ...] = (
    "DO_SPACES_KEY",
    "DO_SPACES_SECRET",
    "DO_SPACES_REGION",
    "DO_SPACES_NAME",
    "DO_SPACES_ENDPOINT",
)


def _normalise_endpoint(raw: str) -> str:
    endpoint = raw.strip().rstrip("/")
    if "://" not in endpoint:
        endpoint = "https://" + endpoint.lstrip(":/")
    parsed = urlparse(endpoint)
    if not (parsed.hostname or "").endswith(".digitaloceanspaces.com"):
        raise SpacesConfigurationError("DO_SPACES_ENDPOINT must point to a *.digitaloceanspaces.com hostname.")
    return f"{parsed.scheme}://{parsed.netloc}"


@lru_cache(maxsize=1)
def load_spaces_config() -> SpacesConfig:
    """Read the DO_SPACES_* variables; the result is cached until ``cache_clear``."""

    missing = sorted(name for name in SPACES_ENV_VARS if not (os.getenv(name) or "").strip())
    if missing:
        raise SpacesConfigurationError("Missing required DigitalOcean Spaces configuration: " + ", ".join(missing))

    try:
        key = require_secret("DO_SPACES_KEY")
        secret = require_secret("DO_SPACES_SECRET")
    except MissingSecretError as exc:
        raise SpacesConfigurationError(str(exc)) from exc

    region = os.environ["DO_SPACES_REGION"].strip()
    bucket = os.environ["DO_SPACES_NAME"].strip()
    for name, value in (("DO_SPACES_REGION", region), ("DO_SPACES_NAME", bucket)):
        if is_placeholder(value):
            raise SpacesConfigurationError(f"{name} must not use a placeholder value")

    return SpacesConfig(
        key=key,
        secret=secret,
        region=region,
        bucket=bucket,
        api_endpoint=f"https://{region}.digitaloceanspaces.com",
        public_endpoint=_normalise_endpoint(os.environ["DO_SPACES_ENDPOINT"]),
    )


@lru_cache(maxsize=1)
def get_spaces_client() -> BaseClient:
    """Create a singleton boto3 client for Spaces interactions."""

    config = load_spaces_config()
    session = Session()
    return session.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.api_endpoint,
        aws_access_key_id=config.key,
        aws_secret_access_key=config.secret,
    )


def _sanitize_segments(parts: Iterable[str]) -> list[str]:
    sanitized: list[str] = []
    for part in parts:
        if part in {"", ".", ".."}:
            continue
        cleaned = re.sub(r"[^A-Za-z0-9._-]", "-", part.strip())
        cleaned = re.sub(r"-+", "-", cleaned).strip("-._")
        if cleaned:
            sanitized.append(cleaned)
    return sanitized


def media_extension(filename: str | None) -> str:
    """Return the lower-cased extension of ``filename`` or raise ``InvalidInput``."""

    extension = Path(filename or "").suffix.lower()
    if extension not in ALLOWED_MEDIA_EXTENSIONS:
        allowed = ", ".join(sorted(ext.lstrip(".") for ext in ALLOWED_MEDIA_EXTENSIONS))
        raise InvalidInput(f"Unsupported media format (allowed: {allowed})")
    return extension


def resolve_content_type(filename: str | None, declared: str | None) -> str:
    """Prefer the declared content type, guessing from the filename when it is generic."""

    content_type = (declared or "").strip().lower()
    if content_type and content_type != "application/octet-stream":
        return content_type
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or "application/octet-stream"


def object_key(filename: str | None, folder: str) -> str:
    """Generate a namespaced object key anchored within the requested folder."""

    extension = media_extension(filename)
    folder_segments = _sanitize_segments((folder or "uploads").replace("\\", "/").split("/"))
    safe_folder = "/".join(folder_segments) or "uploads"
    return f"{safe_folder}/{uuid.uuid4().hex}{extension}"


def build_public_url(key: str) -> str:
    """Build the public URL for an object stored in DigitalOcean Spaces."""

    config = load_spaces_config()
    normalized_key = key.lstrip("/")
    endpoint = config.public_endpoint.rstrip("/")
    return f"{endpoint}/{normalized_key}" if normalized_key else endpoint


class SpacesMediaHost:
    """Media host that stores uploads as public-read objects in a Spaces bucket."""

    def __init__(self, client: BaseClient | None = None) -> None:
        self._client = client

    def _resolve(self) -> tuple[SpacesConfig, BaseClient]:
        try:
            config = load_spaces_config()
            return config, self._client or get_spaces_client()
        except SpacesConfigurationError as exc:
            logger.error("Spaces is not configured: %s", exc)
            raise UpstreamFailure("Media storage is not configured") from exc

    async def upload(self, file: UploadFile, *, folder: str) -> MediaUploadResult:
        file_obj = getattr(file, "file", None)
        if file_obj is None:
            raise MediaMissing()

        key = object_key(file.filename, folder)
        content_type = resolve_content_type(file.filename, file.content_type)
        config, client = self._resolve()

        def _upload() -> None:
            try:
                file_obj.seek(0)
                client.upload_fileobj(
                    file_obj,
                    config.bucket,
                    key,
                    ExtraArgs={"ACL": "public-read", "ContentType": content_type},
                )
            except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
                logger.exception("Upload to DigitalOcean Spaces failed: %s", exc)
                raise UpstreamFailure("Upload failed") from exc

        await run_in_threadpool(_upload)
        return MediaUploadResult(url=build_public_url(key), key=key, content_type=content_type)

    async def discard(self, key: str) -> None:
        if not key:
            return
        config, client = self._resolve()

        def _delete() -> None:
            try:
                client.delete_object(Bucket=config.bucket, Key=key.lstrip("/"))
            except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
                logger.exception("Failed to delete Spaces object %s", key)
                raise UpstreamFailure("Unable to delete media from storage") from exc

        await run_in_threadpool(_delete)


__all__ = [
    "MediaUploadResult",
    "SpacesConfig",
    "SpacesConfigurationError",
    "SpacesMediaHost",
    "build_public_url",
    "get_spaces_client",
    "load_spaces_config",
    "media_extension",
    "object_key",
    "resolve_content_type",
]
