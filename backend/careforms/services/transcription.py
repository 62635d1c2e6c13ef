"""Server-side transcription through AssemblyAI."""

import asyncio
import logging
from typing import Optional, Dict, Any

import httpx
from fastapi import HTTPException, status

from careforms.config import get_settings

logger = logging.getLogger(__name__)

# Vocabulary boosted for care and support documentation
WORD_BOOST = [
    "progress note",
    "medication",
    "behavioral support",
    "ISP goal",
    "community based support",
    "incident report",
    "client",
    "individual",
    "support provided",
    "safety",
    "dignity",
    "next steps",
    "assessment",
]


def provider_language_code(language: str) -> str:
    """Reduce a BCP 47 tag such as ``en-US`` to the provider's ``en``."""
    return (language or "en").split("-")[0].split("_")[0].lower() or "en"


class TranscriptionService:
    """Upload, request and poll an AssemblyAI transcript."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        settings = get_settings()
        self.api_key = settings.assemblyai_api_key if api_key is None else api_key
        self.base_url = settings.assemblyai_base_url.rstrip("/")
        self.poll_interval = settings.assemblyai_poll_interval_seconds
        self.max_poll_attempts = settings.assemblyai_max_poll_attempts
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def transcribe(self, audio: bytes, language: str = "en") -> Dict[str, Any]:
        """
        Transcribe an audio clip.

        Returns ``{"transcript", "confidence", "language"}``. Provider
        failures are raised as HTTP 502, a transcript that never completes
        as HTTP 504.
        """
        if not self.is_configured:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Transcription service not configured"
            )

        language_code = provider_language_code(language)
        headers = {"authorization": self.api_key}
        client = self._client or httpx.AsyncClient(timeout=httpx.Timeout(30.0, connect=5.0))

        try:
            upload = await client.post(
                f"{self.base_url}/upload",
                content=audio,
                headers={**headers, "content-type": "application/octet-stream"},
            )
            upload.raise_for_status()
            audio_url = upload.json()["upload_url"]

            request = await client.post(
                f"{self.base_url}/transcript",
                json={
                    "audio_url": audio_url,
                    "language_code": language_code,
                    "punctuate": True,
                    "format_text": True,
                    "word_boost": WORD_BOOST,
                    "boost_param": "high",
                },
                headers=headers,
            )
            request.raise_for_status()
            transcript_id = request.json()["id"]

            result = None
            for _ in range(self.max_poll_attempts):
                await asyncio.sleep(self.poll_interval)
                polling = await client.get(f"{self.base_url}/transcript/{transcript_id}", headers=headers)
                polling.raise_for_status()
                result = polling.json()

                if result.get("status") == "completed":
                    break
                if result.get("status") == "error":
                    raise HTTPException(
                        status_code=status.HTTP_502_BAD_GATEWAY,
                        detail=f"Transcription provider error: {result.get('error')}"
                    )
        except httpx.HTTPError as e:
            logger.error("AssemblyAI request failed: %s", e)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Transcription service error: {str(e)}"
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error("AssemblyAI returned an unexpected body: %r", e)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Transcription service returned a malformed response"
            )
        finally:
            if self._client is None:
                await client.aclose()

        if not result or result.get("status") != "completed":
            raise HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                detail="Transcription timeout - please try again with shorter audio"
            )

        return {
            "transcript": result.get("text") or "",
            "confidence": result.get("confidence") or 0.0,
            "language": result.get("language_code") or language_code,
        }
