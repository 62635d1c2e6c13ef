"""Upload client for the cloud-fallback transcription path."""

import logging
from typing import Optional, Dict

import httpx

from careforms.config import get_settings
from careforms.exceptions import TranscriptionHTTPError, TranscriptionTransportError

logger = logging.getLogger(__name__)


class HttpTranscriber:
    """Posts a recorded clip to the transcription endpoint and returns the text."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        mime_type: str = "audio/webm",
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.endpoint = endpoint or settings.transcription_endpoint
        self.mime_type = mime_type
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.transcription_timeout_seconds, connect=5.0),
            headers=headers,
        )

    async def transcribe(self, audio: bytes, language: str) -> str:
        files = {"audio": ("recording.webm", audio, self.mime_type)}
        try:
            response = await self._client.post(self.endpoint, files=files, data={"language": language})
        except httpx.TransportError as e:
            raise TranscriptionTransportError(str(e)) from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = ""
            if isinstance(body, dict):
                message = body.get("message") or str(body.get("detail") or "")
            logger.warning("Transcription upload failed with status %s: %s", response.status_code, message)
            raise TranscriptionHTTPError(response.status_code, message)

        try:
            body = response.json()
        except ValueError as e:
            raise TranscriptionHTTPError(response.status_code, f"Malformed transcription response: {e}") from e
        if not isinstance(body, dict):
            raise TranscriptionHTTPError(response.status_code, "Malformed transcription response: expected an object")

        transcript = body.get("transcript") or ""
        if not isinstance(transcript, str):
            raise TranscriptionHTTPError(response.status_code, "Malformed transcription response: transcript is not text")
        return transcript

    async def aclose(self) -> None:
        await self._client.aclose()
