"""Utility modules."""

from app.utils.datetime import utc_now
from app.utils.exceptions import (
    NotFoundError,
    StorageError,
    TransientNetworkError,
    UpstreamError,
    ValidationError,
    VoiceNotesException,
)

__all__ = [
    "utc_now",
    "NotFoundError",
    "StorageError",
    "TransientNetworkError",
    "UpstreamError",
    "ValidationError",
    "VoiceNotesException",
]
