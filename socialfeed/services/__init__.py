"""Convenience exports for service layer."""
from .cleanup_service import CleanupError, CleanupWorker, run_cleanup
from .container import ServiceContainer, build_services
from .identity_service import IdentityStore, hash_password, verify_password
from .media_service import MediaHost, MediaReference, MediaStore, classify_media_type
from .message_service import DirectMessageLog, MessageRecord
from .post_service import CommentRecord, PostAggregate, PostRecord
from .session_service import SessionClaim, SessionManager
from .spaces_service import MediaUploadResult, SpacesConfigurationError, SpacesMediaHost

__all__ = [
    "CleanupError",
    "CleanupWorker",
    "run_cleanup",
    "ServiceContainer",
    "build_services",
    "IdentityStore",
    "hash_password",
    "verify_password",
    "MediaHost",
    "MediaReference",
    "MediaStore",
    "classify_media_type",
    "DirectMessageLog",
    "MessageRecord",
    "CommentRecord",
    "PostAggregate",
    "PostRecord",
    "SessionClaim",
    "SessionManager",
    "MediaUploadResult",
    "SpacesConfigurationError",
    "SpacesMediaHost",
]
