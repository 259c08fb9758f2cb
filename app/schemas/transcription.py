"""Transcription schemas."""

from pydantic import BaseModel


class TranscriptionSegment(BaseModel):
    id: int
    seek: int = 0
    start: float
    end: float
    text: str
    tokens: list[int] | None = None
    temperature: float = 0.0
    avg_logprob: float = 0.0
    compression_ratio: float = 0.0
    no_speech_prob: float = 0.0


class TranscriptionResult(BaseModel):
    """verbose_json payload returned by the Whisper service."""

    text: str = ""
    language: str | None = None
    duration: float | None = None
    segments: list[TranscriptionSegment] | None = None
