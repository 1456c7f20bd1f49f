"""Upload, feed, like and comment routes, built once per post partition."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..constants import POST_MEDIA_FOLDER, PostPartition
from ..dependencies import get_current_claim, get_services
from ..errors import MediaMissing, SocialError
from ..schemas import (
    CommentCreate,
    CommentResponse,
    CommentsResponse,
    LikeResponse,
    PostResponse,
    UploadResponse,
)
from ..services import ServiceContainer, SessionClaim


def build_posts_router(partition: PostPartition, *, prefix: str = "", feed_path: str = "/images") -> APIRouter:
    """Return the post routes for ``partition`` mounted under ``prefix``."""

    router = APIRouter(prefix=prefix, tags=[f"{partition.value}-posts"])

    @router.post("/upload", response_model=UploadResponse, response_model_exclude_none=True)
    async def upload_endpoint(
        media: UploadFile | None = File(None),
        caption: str | None = Form(None),
        claim: SessionClaim = Depends(get_current_claim),
        services: ServiceContainer = Depends(get_services),
    ) -> UploadResponse:
        """Store ``media`` on the media host and publish it as a post.

        The session is resolved before anything is uploaded. If the post cannot
        be created once the host has the file, the upload is discarded.
        """

        if media is None or not (media.filename or "").strip():
            raise MediaMissing()

        reference = await services.media.upload(claim, media, folder=POST_MEDIA_FOLDER)
        try:
            post = services.posts.create_post(claim, reference, caption, partition=partition)
        except SocialError:
            await services.media.discard(reference)
            raise
        return UploadResponse(success=True, post=PostResponse.model_validate(post))

    @router.get(feed_path, response_model=list[PostResponse])
    def feed_endpoint(services: ServiceContainer = Depends(get_services)) -> list[PostResponse]:
        return [PostResponse.model_validate(post) for post in services.posts.list_posts(partition)]

    @router.post("/like/{post_id}", response_model=LikeResponse)
    def like_endpoint(
        post_id: str,
        claim: SessionClaim = Depends(get_current_claim),
        services: ServiceContainer = Depends(get_services),
    ) -> LikeResponse:
        likes = services.posts.like_post(post_id, partition=partition)
        return LikeResponse(success=True, likes=likes)

    @router.get("/comments/{post_id}", response_model=list[CommentResponse])
    def list_comments_endpoint(
        post_id: str,
        services: ServiceContainer = Depends(get_services),
    ) -> list[CommentResponse]:
        comments = services.posts.list_comments(post_id, partition=partition)
        return [CommentResponse.model_validate(comment) for comment in comments]

    @router.post("/comments/{post_id}", response_model=CommentsResponse)
    def add_comment_endpoint(
        post_id: str,
        payload: CommentCreate,
        claim: SessionClaim = Depends(get_current_claim),
        services: ServiceContainer = Depends(get_services),
    ) -> CommentsResponse:
        comments = services.posts.add_comment(claim, post_id, payload.text, partition=partition)
        return CommentsResponse(success=True, comments=[CommentResponse.model_validate(c) for c in comments])

    return router


posts_router = build_posts_router(PostPartition.ORDINARY)
business_router = build_posts_router(PostPartition.BUSINESS, prefix="/business", feed_path="/posts")

__all__ = ["build_posts_router", "posts_router", "business_router"]
