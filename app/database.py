"""Database engine and session management."""

from pathlib import Path

from sqlalchemy import Engine
from sqlalchemy.engine import make_url
from sqlmodel import SQLModel, create_engine

from app.config import settings
from app.models.note import NoteRecord
from app.models.voice_note import (
    VoiceNoteEntity,
    VoiceNotePhotoEntity,
    VoiceNoteTagEntity,
)

SERVER_TABLES = [NoteRecord.__table__]
CLIENT_TABLES = [
    VoiceNoteEntity.__table__,
    VoiceNotePhotoEntity.__table__,
    VoiceNoteTagEntity.__table__,
]


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create a SQLite engine, making sure the database directory exists."""
    database = make_url(database_url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False},
    )


engine = create_db_engine(settings.database_url)


def create_db_and_tables(db_engine: Engine | None = None) -> None:
    """Create the backend tables if they are missing."""
    SQLModel.metadata.create_all(db_engine or engine, tables=SERVER_TABLES)


def create_client_tables(db_engine: Engine) -> None:
    """Create the on-device note tables if they are missing."""
    SQLModel.metadata.create_all(db_engine, tables=CLIENT_TABLES)

