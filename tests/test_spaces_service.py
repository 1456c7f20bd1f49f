"""DigitalOcean Spaces media host: configuration, key naming and uploads."""
from __future__ import annotations

import asyncio
from io import BytesIO
from typing import Iterator

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient
from starlette.datastructures import Headers

from socialfeed.errors import InvalidInput, MediaMissing, UpstreamFailure
from socialfeed.main import create_app
from socialfeed.services import SpacesConfigurationError, SpacesMediaHost, spaces_service

from feed_helpers import signup, upload

SPACES_VARS = ("DO_SPACES_KEY", "DO_SPACES_SECRET", "DO_SPACES_REGION", "DO_SPACES_NAME", "DO_SPACES_ENDPOINT")


class StubS3Client:
    def __init__(self) -> None:
        self.uploads: list[tuple[str, str, dict]] = []
        self.deleted: list[tuple[str, str]] = []

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        assert fileobj.read() == b"binary"
        self.uploads.append((bucket, key, ExtraArgs or {}))

    def delete_object(self, *, Bucket, Key):
        self.deleted.append((Bucket, Key))


def _upload_file(filename: str, content_type: str) -> UploadFile:
    return UploadFile(BytesIO(b"binary"), filename=filename, headers=Headers({"content-type": content_type}))


@pytest.fixture(autouse=True)
def _reset_spaces_cache() -> Iterator[None]:
    spaces_service.load_spaces_config.cache_clear()
    spaces_service.get_spaces_client.cache_clear()
    yield
    spaces_service.load_spaces_config.cache_clear()
    spaces_service.get_spaces_client.cache_clear()


@pytest.fixture
def spaces_env(monkeypatch):
    monkeypatch.setenv("DO_SPACES_KEY", "key")
    monkeypatch.setenv("DO_SPACES_SECRET", "secret")
    monkeypatch.setenv("DO_SPACES_REGION", "nyc3")
    monkeypatch.setenv("DO_SPACES_NAME", "bucket")
    monkeypatch.setenv("DO_SPACES_ENDPOINT", "https://bucket.nyc3.digitaloceanspaces.com")


@pytest.fixture
def no_spaces_env(monkeypatch):
    for var in SPACES_VARS:
        monkeypatch.delenv(var, raising=False)


def test_missing_configuration_is_reported(no_spaces_env):
    with pytest.raises(SpacesConfigurationError) as excinfo:
        spaces_service.load_spaces_config()

    assert "DO_SPACES_KEY" in str(excinfo.value)


def test_endpoint_must_be_a_spaces_host(spaces_env, monkeypatch):
    monkeypatch.setenv("DO_SPACES_ENDPOINT", "https://s3.amazonaws.com")

    with pytest.raises(SpacesConfigurationError):
        spaces_service.load_spaces_config()


def test_placeholder_secrets_are_rejected(spaces_env, monkeypatch):
    monkeypatch.setenv("DO_SPACES_SECRET", "changeme")

    with pytest.raises(SpacesConfigurationError):
        spaces_service.load_spaces_config()


def test_config_derives_endpoints(spaces_env, monkeypatch):
    monkeypatch.setenv("DO_SPACES_ENDPOINT", "bucket.nyc3.digitaloceanspaces.com/")

    config = spaces_service.load_spaces_config()

    assert config.api_endpoint == "https://nyc3.digitaloceanspaces.com"
    assert config.public_endpoint == "https://bucket.nyc3.digitaloceanspaces.com"
    assert spaces_service.build_public_url("/uploads/a.png") == "https://bucket.nyc3.digitaloceanspaces.com/uploads/a.png"


@pytest.mark.parametrize("filename", ["photo.jpg", "photo.JPEG", "image.png", "clip.mp4", "clip.MOV"])
def test_allowed_extensions(filename):
    assert spaces_service.media_extension(filename) == "." + filename.rsplit(".", 1)[1].lower()


@pytest.mark.parametrize("filename", ["anim.gif", "notes.txt", "noextension", "", None])
def test_unsupported_extensions_are_rejected(filename):
    with pytest.raises(InvalidInput) as excinfo:
        spaces_service.media_extension(filename)

    assert "Unsupported media format" in excinfo.value.message


def test_object_key_stays_within_folder():
    key = spaces_service.object_key("photo.png", "../weird folder//")

    folder, name = key.split("/")
    assert folder == "weird-folder"
    assert name.endswith(".png") and len(name) == 32 + len(".png")


def test_content_type_is_guessed_for_generic_uploads():
    assert spaces_service.resolve_content_type("clip.mp4", "application/octet-stream") == "video/mp4"
    assert spaces_service.resolve_content_type("clip.mov", None) == "video/quicktime"
    assert spaces_service.resolve_content_type("photo.png", "Image/PNG") == "image/png"


def test_upload_puts_public_object(spaces_env):
    client = StubS3Client()
    host = SpacesMediaHost(client=client)

    result = asyncio.run(host.upload(_upload_file("clip.mp4", "video/mp4"), folder="uploads"))

    bucket, key, extra = client.uploads[0]
    assert bucket == "bucket"
    assert key == result.key and key.startswith("uploads/") and key.endswith(".mp4")
    assert extra == {"ACL": "public-read", "ContentType": "video/mp4"}
    assert result.url == f"https://bucket.nyc3.digitaloceanspaces.com/{key}"
    assert result.content_type == "video/mp4"

    asyncio.run(host.discard(result.key))
    assert client.deleted == [("bucket", key)]


def test_upload_rejects_unsupported_media_before_contacting_spaces(spaces_env):
    client = StubS3Client()
    host = SpacesMediaHost(client=client)

    with pytest.raises(InvalidInput):
        asyncio.run(host.upload(_upload_file("anim.gif", "image/gif"), folder="uploads"))
    assert client.uploads == []


def test_upload_without_file_object(spaces_env):
    host = SpacesMediaHost(client=StubS3Client())

    with pytest.raises(MediaMissing):
        asyncio.run(host.upload(object(), folder="uploads"))


def test_unconfigured_host_fails_upstream(no_spaces_env):
    host = SpacesMediaHost(client=StubS3Client())

    with pytest.raises(UpstreamFailure) as excinfo:
        asyncio.run(host.upload(_upload_file("photo.png", "image/png"), folder="uploads"))

    assert excinfo.value.retryable is True


def test_upload_route_reports_unconfigured_storage(settings, no_spaces_env):
    with TestClient(create_app(settings, media_host=SpacesMediaHost())) as client:
        signup(client, "alice")
        unconfigured = upload(client)
        unsupported = upload(client, filename="anim.gif", content_type="image/gif")

    assert unconfigured.status_code == 502
    assert unconfigured.json() == {
        "success": False,
        "message": "Media storage is not configured",
        "error": "upstream_failure",
    }
    assert unsupported.status_code == 400
    assert unsupported.json()["error"] == "invalid_input"
