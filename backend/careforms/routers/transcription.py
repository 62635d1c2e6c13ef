"""Speech-to-text router for the cloud-fallback capture path."""

import logging

from fastapi import APIRouter, Depends, UploadFile, File, Form, status
from fastapi.responses import JSONResponse

from careforms.schemas.transcription import TranscriptionResult, TranscriptionStatusResponse
from careforms.services.transcription import TranscriptionService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_transcription_service() -> TranscriptionService:
    return TranscriptionService()


@router.post("", response_model=TranscriptionResult)
async def transcribe(
    audio: UploadFile = File(None),
    language: str = Form("en"),
    service: TranscriptionService = Depends(get_transcription_service)
):
    """Transcribe an uploaded audio clip."""
    if not service.is_configured:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": "Transcription service not configured",
                "message": "AssemblyAI API key is missing. Contact your administrator.",
            },
        )

    if audio is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "No audio file provided",
                "message": "Please provide an audio file in the request",
            },
        )

    payload = await audio.read()
    logger.info("Transcribing %d bytes, language: %s", len(payload), language)

    result = await service.transcribe(payload, language)

    logger.info(
        "Transcription successful: %d characters, confidence: %s",
        len(result["transcript"]), result["confidence"]
    )
    return TranscriptionResult(**result)


@router.get("/status", response_model=TranscriptionStatusResponse)
async def transcription_status(
    service: TranscriptionService = Depends(get_transcription_service)
):
    """Report whether cloud transcription is available."""
    configured = service.is_configured
    return TranscriptionStatusResponse(
        available=configured,
        provider="AssemblyAI" if configured else "none",
        message=(
            "Speech-to-text service is available"
            if configured
            else "Speech-to-text service is not configured"
        ),
    )
