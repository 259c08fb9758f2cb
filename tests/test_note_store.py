"""Tests for the note store."""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from app.models.note import NoteRecord
from app.models.status import RecognitionStatus
from app.repositories.note_store import NoteStore
from app.utils.exceptions import NotFoundError, StorageError


def make_note(title: str = "Groceries", category: str = "Inbox") -> NoteRecord:
    return NoteRecord(
        title=title,
        category_label=category,
        original_text="original",
        recognition_status=RecognitionStatus.UPLOADED,
    )


@pytest.mark.asyncio
async def test_create_then_get_returns_same_note(store: NoteStore):
    """Test that a created note can be read back unchanged."""
    created = await store.create(make_note())

    fetched = await store.get(created.id)
    assert fetched is not None
    assert fetched.title == "Groceries"
    assert fetched.category_label == "Inbox"
    assert fetched.recognition_status == RecognitionStatus.UPLOADED
    assert fetched.created_at == fetched.updated_at


@pytest.mark.asyncio
async def test_create_assigns_fresh_id(store: NoteStore):
    """Test that caller-provided ids are replaced."""
    note = make_note()
    note.id = "caller-chosen"

    first = await store.create(note)
    second = await store.create(make_note("Other"))

    assert first.id != "caller-chosen"
    assert first.id != second.id


@pytest.mark.asyncio
async def test_get_unknown_note_returns_none(store: NoteStore):
    assert await store.get("does-not-exist") is None


@pytest.mark.asyncio
async def test_update_status_preserves_category_when_missing(store: NoteStore):
    """Test that an update without category keeps the stored label."""
    created = await store.create(make_note(category="Inbox"))

    await store.update_status(created.id, RecognitionStatus.COMPLETED, "done", None, None)

    updated = await store.get(created.id)
    assert updated is not None
    assert updated.recognition_status == RecognitionStatus.COMPLETED
    assert updated.category_label == "Inbox"
    assert updated.recognized_text == "done"


@pytest.mark.asyncio
async def test_update_status_ignores_empty_category(store: NoteStore):
    created = await store.create(make_note(category="Work"))

    await store.update_status(created.id, RecognitionStatus.QUEUED, category_label="")

    updated = await store.get(created.id)
    assert updated is not None
    assert updated.category_label == "Work"


@pytest.mark.asyncio
async def test_update_status_replaces_category_and_error(store: NoteStore):
    created = await store.create(make_note(category="Inbox"))

    await store.update_status(
        created.id,
        RecognitionStatus.FAILED,
        category_label="Ideas",
        error_message="boom",
    )
    updated = await store.get(created.id)
    assert updated is not None
    assert updated.category_label == "Ideas"
    assert updated.error_message == "boom"

    await store.update_status(created.id, RecognitionStatus.QUEUED)
    requeued = await store.get(created.id)
    assert requeued is not None
    assert requeued.error_message is None
    assert requeued.recognized_text is None


@pytest.mark.asyncio
async def test_update_status_refreshes_updated_at(store: NoteStore):
    created = await store.create(make_note())

    await store.update_status(created.id, RecognitionStatus.QUEUED)

    updated = await store.get(created.id)
    assert updated is not None
    assert updated.updated_at >= created.updated_at
    assert updated.created_at == created.created_at


@pytest.mark.asyncio
async def test_create_write_failure_raises_storage_error(store: NoteStore, monkeypatch):
    """Test that a failing commit surfaces as StorageError and stores nothing."""
    await store.ensure_initialized()

    def failing_commit(self):
        raise OperationalError("INSERT INTO notes", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Session, "commit", failing_commit)

    with pytest.raises(StorageError):
        await store.create(make_note())

    monkeypatch.undo()
    assert await store.list_by_status(RecognitionStatus.UPLOADED) == []


@pytest.mark.asyncio
async def test_update_status_unknown_note_raises(store: NoteStore):
    with pytest.raises(NotFoundError):
        await store.update_status("missing", RecognitionStatus.QUEUED)


@pytest.mark.asyncio
async def test_list_by_status_returns_exactly_queued_notes(store: NoteStore):
    """Test that only notes whose last update set Queued are listed."""
    notes = [await store.create(make_note(f"Note {i}")) for i in range(4)]

    await store.update_status(notes[3].id, RecognitionStatus.QUEUED)
    await store.update_status(notes[1].id, RecognitionStatus.QUEUED)
    await store.update_status(notes[2].id, RecognitionStatus.QUEUED)
    await store.update_status(notes[2].id, RecognitionStatus.RECOGNIZING)

    queued = await store.list_by_status(RecognitionStatus.QUEUED)
    assert {n.id for n in queued} == {notes[1].id, notes[3].id}

    uploaded = await store.list_by_status(RecognitionStatus.UPLOADED)
    assert {n.id for n in uploaded} == {notes[0].id}


@pytest.mark.asyncio
async def test_photo_paths_round_trip(store: NoteStore):
    note = make_note()
    note.photo_paths = ["/media/a.jpg", "/media/b.jpg"]

    created = await store.create(note)
    fetched = await store.get(created.id)

    assert fetched is not None
    assert fetched.photo_paths == ["/media/a.jpg", "/media/b.jpg"]


@pytest.mark.asyncio
async def test_concurrent_first_use_initializes_once(file_engine, monkeypatch):
    """Test that racing first calls create the schema a single time."""
    import app.repositories.note_store as note_store_module

    calls = []
    original = note_store_module.create_db_and_tables

    def counting_create(db_engine):
        calls.append(db_engine)
        original(db_engine)

    monkeypatch.setattr(note_store_module, "create_db_and_tables", counting_create)
    store = NoteStore(file_engine)

    await asyncio.gather(*(store.get(f"id-{i}") for i in range(8)))

    assert len(calls) == 1
