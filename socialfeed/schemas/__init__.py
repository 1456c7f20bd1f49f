"""Convenience exports for schema layer."""
from .auth import AuthCheckResponse, AuthResponse, LoginRequest, SignupRequest, SuccessResponse, UserSummary
from .messages import DirectMessageCreate, DirectMessageResponse, DirectMessageSendResponse
from .posts import CommentCreate, CommentResponse, CommentsResponse, LikeResponse, PostResponse, UploadResponse
from .profiles import ProfilePictureResponse, ProfileResponse

__all__ = [
    "AuthCheckResponse",
    "AuthResponse",
    "LoginRequest",
    "SignupRequest",
    "SuccessResponse",
    "UserSummary",
    "DirectMessageCreate",
    "DirectMessageResponse",
    "DirectMessageSendResponse",
    "CommentCreate",
    "CommentResponse",
    "CommentsResponse",
    "LikeResponse",
    "PostResponse",
    "UploadResponse",
    "ProfilePictureResponse",
    "ProfileResponse",
]
