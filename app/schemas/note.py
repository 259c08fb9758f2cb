"""Note schemas."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.status import RecognitionStatus


class NoteResponse(BaseModel):
    """Projection of a note returned by the notes API."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    title: str
    category_label: str
    recognized_text: str | None = None
    recognition_status: RecognitionStatus
    error_message: str | None = None
