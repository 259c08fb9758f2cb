"""Custom exception classes."""

from fastapi import HTTPException, status


class VoiceNotesException(Exception):
    """Base exception for the notes backend and sync client."""

    def __init__(self, detail: str = "Unexpected error"):
        self.detail = detail
        super().__init__(detail)


class ValidationError(VoiceNotesException):
    """Raised when a required field is missing or invalid."""

    def __init__(self, detail: str = "Invalid request"):
        super().__init__(detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=self.detail,
        )


class NotFoundError(VoiceNotesException):
    """Raised when a resource is not found."""

    def __init__(self, resource: str = "Resource", detail: str | None = None):
        super().__init__(detail or f"{resource} not found")

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=self.detail,
        )


class StorageError(VoiceNotesException):
    """Raised when the note database cannot be read or written."""

    def __init__(self, detail: str = "Storage failure"):
        super().__init__(detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=self.detail,
        )


class UpstreamError(VoiceNotesException):
    """Raised when the transcription service call fails."""

    def __init__(self, detail: str = "Transcription service error"):
        super().__init__(detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=self.detail,
        )


class TransientNetworkError(VoiceNotesException):
    """Raised when the backend is unreachable (offline, DNS, timeouts)."""

    def __init__(self, detail: str = "Backend unreachable"):
        super().__init__(detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=self.detail,
        )
