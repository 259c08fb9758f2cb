"""Background tasks module."""

from app.tasks.recognition_worker import RecognitionWorker

__all__ = ["RecognitionWorker"]
