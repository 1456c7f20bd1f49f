"""Post aggregate: media reference, like counter and comment log as one unit."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import PostPartition
from ..database import SessionFactory
from ..errors import EmptyComment, MediaMissing, NotAuthenticated, NotFound, UpstreamFailure
from ..models import Post, PostComment
from ..models.base import as_utc
from .media_service import MediaReference, classify_media_type
from .session_service import SessionClaim

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommentRecord:
    author_username: str
    text: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class PostRecord:
    id: UUID
    partition: PostPartition
    owner_username: str
    media_url: str
    media_type: str
    caption: str
    like_count: int
    created_at: datetime
    comments: tuple[CommentRecord, ...] = field(default_factory=tuple)


def _to_comment_record(comment: PostComment) -> CommentRecord:
    return CommentRecord(
        author_username=comment.author_username,
        text=comment.text,
        created_at=as_utc(comment.created_at),
    )


def _to_post_record(post: Post, comments: Iterable[CommentRecord] = ()) -> PostRecord:
    return PostRecord(
        id=post.id,
        partition=PostPartition(post.partition),
        owner_username=post.owner_username,
        media_url=post.media_url,
        media_type=post.media_type,
        caption=post.caption or "",
        like_count=int(post.like_count or 0),
        created_at=as_utc(post.created_at),
        comments=tuple(comments),
    )


def _parse_post_id(post_id: UUID | str) -> UUID:
    if isinstance(post_id, UUID):
        return post_id
    try:
        return UUID(str(post_id).strip())
    except ValueError as exc:
        raise NotFound("Post not found") from exc


class PostAggregate:
    """Create, list, like and comment on posts within a partition."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def create_post(
        self,
        claim: SessionClaim | None,
        media: MediaReference | None,
        caption: str | None = None,
        *,
        partition: PostPartition = PostPartition.ORDINARY,
    ) -> PostRecord:
        if claim is None:
            raise NotAuthenticated()
        if media is None or not (media.url or "").strip():
            raise MediaMissing()

        post = Post(
            partition=partition.value,
            owner_id=claim.user_id,
            owner_username=claim.username,
            media_asset_id=media.asset_id,
            media_url=media.url,
            media_type=classify_media_type(media.content_type).value,
            caption=(caption or "").strip(),
            like_count=0,
        )
        with self._session_factory() as db:
            db.add(post)
            try:
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Failed to create post for %s", claim.username)
                raise UpstreamFailure("Upload failed") from exc
            db.refresh(post)
            logger.info("Created %s post %s for %s", partition.value, post.id, claim.username)
            return _to_post_record(post)

    def list_posts(self, partition: PostPartition = PostPartition.ORDINARY) -> list[PostRecord]:
        """Return every post in ``partition``, newest first, with its comments."""

        with self._session_factory() as db:
            posts = db.scalars(
                select(Post)
                .where(Post.partition == partition.value)
                .order_by(Post.created_at.desc(), Post.id.desc())
            ).all()
            comments = self._comments_by_post(db, [post.id for post in posts])
        return [_to_post_record(post, comments.get(post.id, ())) for post in posts]

    def get_post(self, post_id: UUID | str, *, partition: PostPartition | None = None) -> PostRecord:
        pid = _parse_post_id(post_id)
        with self._session_factory() as db:
            post = self._get_post_or_404(db, pid, partition)
            comments = self._comments_by_post(db, [pid])
        return _to_post_record(post, comments.get(pid, ()))

    def like_post(self, post_id: UUID | str, *, partition: PostPartition | None = None) -> int:
        """Add one like and return the new count.

        The increment is a single UPDATE evaluated by the database, so
        concurrent likes on the same post are never lost.
        """

        pid = _parse_post_id(post_id)
        stmt = update(Post).where(Post.id == pid)
        if partition is not None:
            stmt = stmt.where(Post.partition == partition.value)
        stmt = (
            stmt.values(like_count=Post.like_count + 1)
            .returning(Post.like_count)
            .execution_options(synchronize_session=False)
        )

        with self._session_factory() as db:
            try:
                new_count = db.execute(stmt).scalar_one_or_none()
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Failed to like post %s", pid)
                raise UpstreamFailure("Failed to update like") from exc

        if new_count is None:
            raise NotFound("Post not found")
        return int(new_count)

    def list_comments(self, post_id: UUID | str, *, partition: PostPartition | None = None) -> list[CommentRecord]:
        pid = _parse_post_id(post_id)
        with self._session_factory() as db:
            self._get_post_or_404(db, pid, partition)
            return list(self._comments_by_post(db, [pid]).get(pid, ()))

    def add_comment(
        self,
        claim: SessionClaim | None,
        post_id: UUID | str,
        text: str | None,
        *,
        partition: PostPartition | None = None,
    ) -> list[CommentRecord]:
        """Append a comment and return the post's full comment log in order."""

        if claim is None:
            raise NotAuthenticated()
        body = (text or "").strip()
        if not body:
            raise EmptyComment()

        pid = _parse_post_id(post_id)
        with self._session_factory() as db:
            self._get_post_or_404(db, pid, partition)
            db.add(PostComment(post_id=pid, author_username=claim.username, text=body))
            try:
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Failed to add comment to post %s", pid)
                raise UpstreamFailure("Failed to add comment") from exc
            return list(self._comments_by_post(db, [pid]).get(pid, ()))

    @staticmethod
    def _get_post_or_404(db: Session, post_id: UUID, partition: PostPartition | None) -> Post:
        post = db.get(Post, post_id)
        if post is None or (partition is not None and post.partition != partition.value):
            raise NotFound("Post not found")
        return post

    @staticmethod
    def _comments_by_post(db: Session, post_ids: list[UUID]) -> dict[UUID, list[CommentRecord]]:
        grouped: dict[UUID, list[CommentRecord]] = defaultdict(list)
        if not post_ids:
            return grouped
        stmt = (
            select(PostComment)
            .where(PostComment.post_id.in_(post_ids))
            .order_by(PostComment.id.asc())
        )
        for comment in db.scalars(stmt):
            grouped[comment.post_id].append(_to_comment_record(comment))
        return grouped


__all__ = ["CommentRecord", "PostAggregate", "PostRecord"]
