"""Transcription Pydantic schemas."""

from pydantic import BaseModel


class TranscriptionResult(BaseModel):
    success: bool = True
    transcript: str
    confidence: float = 0.0
    language: str


class TranscriptionStatusResponse(BaseModel):
    available: bool
    provider: str
    message: str
