"""Recognition and sync status enums with their display mappings."""

from enum import Enum


class RecognitionStatus(str, Enum):
    """Server-side recognition lifecycle of a note."""

    UPLOADED = "Uploaded"
    QUEUED = "Queued"
    RECOGNIZING = "Recognizing"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RecognitionStatus.COMPLETED, RecognitionStatus.FAILED)


class LocalRecognitionStatus(str, Enum):
    """Client-side projection of the recognition status."""

    IN_QUEUE = "InQueue"
    RECOGNIZING = "Recognizing"
    READY = "Ready"
    ERROR = "Error"

    @property
    def is_terminal(self) -> bool:
        return self in (LocalRecognitionStatus.READY, LocalRecognitionStatus.ERROR)


class SyncStatus(str, Enum):
    """Mirroring state of a locally captured note."""

    LOCAL_ONLY = "LocalOnly"
    UPLOADING = "Uploading"
    SYNCED = "Synced"
    FAILED = "Failed"


_REMOTE_TO_LOCAL: dict[RecognitionStatus, LocalRecognitionStatus] = {
    RecognitionStatus.UPLOADED: LocalRecognitionStatus.IN_QUEUE,
    RecognitionStatus.QUEUED: LocalRecognitionStatus.IN_QUEUE,
    RecognitionStatus.RECOGNIZING: LocalRecognitionStatus.RECOGNIZING,
    RecognitionStatus.COMPLETED: LocalRecognitionStatus.READY,
    RecognitionStatus.FAILED: LocalRecognitionStatus.ERROR,
}

_LABELS: dict[type[Enum], dict[Enum, str]] = {
    RecognitionStatus: {
        RecognitionStatus.UPLOADED: "Uploaded",
        RecognitionStatus.QUEUED: "Waiting for recognition",
        RecognitionStatus.RECOGNIZING: "Recognizing",
        RecognitionStatus.COMPLETED: "Recognized",
        RecognitionStatus.FAILED: "Recognition failed",
    },
    LocalRecognitionStatus: {
        LocalRecognitionStatus.IN_QUEUE: "In queue",
        LocalRecognitionStatus.RECOGNIZING: "Recognizing",
        LocalRecognitionStatus.READY: "Ready",
        LocalRecognitionStatus.ERROR: "Error",
    },
    SyncStatus: {
        SyncStatus.LOCAL_ONLY: "Saved on device",
        SyncStatus.UPLOADING: "Uploading",
        SyncStatus.SYNCED: "Synced",
        SyncStatus.FAILED: "Sync failed",
    },
}


def map_remote_status(status: RecognitionStatus) -> LocalRecognitionStatus:
    """Project a server recognition status onto the client's status set."""
    return _REMOTE_TO_LOCAL[RecognitionStatus(status)]


def status_label(status: RecognitionStatus | LocalRecognitionStatus | SyncStatus) -> str:
    """Human-readable label for any status value."""
    # Values overlap across the enums ("Failed"), so look up per type
    return _LABELS[type(status)][status]
