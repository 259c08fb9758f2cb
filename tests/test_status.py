"""Tests for status mappings."""

import pytest

from app.models.status import (
    LocalRecognitionStatus,
    RecognitionStatus,
    SyncStatus,
    map_remote_status,
    status_label,
)


@pytest.mark.parametrize(
    ("remote", "local"),
    [
        (RecognitionStatus.UPLOADED, LocalRecognitionStatus.IN_QUEUE),
        (RecognitionStatus.QUEUED, LocalRecognitionStatus.IN_QUEUE),
        (RecognitionStatus.RECOGNIZING, LocalRecognitionStatus.RECOGNIZING),
        (RecognitionStatus.COMPLETED, LocalRecognitionStatus.READY),
        (RecognitionStatus.FAILED, LocalRecognitionStatus.ERROR),
    ],
)
def test_map_remote_status(remote, local):
    assert map_remote_status(remote) == local


def test_map_remote_status_accepts_wire_value():
    assert map_remote_status("Completed") == LocalRecognitionStatus.READY  # type: ignore[arg-type]


def test_terminal_statuses():
    assert {s for s in RecognitionStatus if s.is_terminal} == {
        RecognitionStatus.COMPLETED,
        RecognitionStatus.FAILED,
    }
    assert {s for s in LocalRecognitionStatus if s.is_terminal} == {
        LocalRecognitionStatus.READY,
        LocalRecognitionStatus.ERROR,
    }


def test_every_status_has_a_label():
    for enum in (RecognitionStatus, LocalRecognitionStatus, SyncStatus):
        for member in enum:
            assert status_label(member)


def test_failed_labels_are_distinct():
    assert status_label(RecognitionStatus.FAILED) == "Recognition failed"
    assert status_label(SyncStatus.FAILED) == "Sync failed"
