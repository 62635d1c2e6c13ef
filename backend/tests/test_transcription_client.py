import asyncio

import httpx
import pytest

from careforms.exceptions import TranscriptionHTTPError, TranscriptionTransportError
from careforms.services.transcription_client import HttpTranscriber

ENDPOINT = "http://testserver/api/transcribe"


def _transcriber(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTranscriber(endpoint=ENDPOINT, client=client)


def test_uploads_clip_with_language():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = request.content
        return httpx.Response(200, json={"success": True, "transcript": "client ate lunch", "confidence": 0.9})

    transcript = asyncio.run(_transcriber(handler).transcribe(b"RIFFDATA", "en-US"))

    assert transcript == "client ate lunch"
    assert seen["url"] == ENDPOINT
    assert b'name="audio"; filename="recording.webm"' in seen["body"]
    assert b"RIFFDATA" in seen["body"]
    assert b'name="language"' in seen["body"]
    assert b"en-US" in seen["body"]


def test_missing_transcript_is_empty_string():
    transcriber = _transcriber(lambda request: httpx.Response(200, json={"success": True, "transcript": None}))
    assert asyncio.run(transcriber.transcribe(b"x", "en")) == ""


def test_not_configured_status_is_kept():
    def handler(request):
        return httpx.Response(503, json={
            "error": "Transcription service not configured",
            "message": "AssemblyAI API key is missing. Contact your administrator.",
        })

    with pytest.raises(TranscriptionHTTPError) as excinfo:
        asyncio.run(_transcriber(handler).transcribe(b"x", "en"))

    assert excinfo.value.status_code == 503
    assert "API key is missing" in str(excinfo.value)


def test_fastapi_error_detail_becomes_message():
    handler = lambda request: httpx.Response(502, json={"detail": "Transcription service error: boom"})

    with pytest.raises(TranscriptionHTTPError) as excinfo:
        asyncio.run(_transcriber(handler).transcribe(b"x", "en"))

    assert excinfo.value.status_code == 502
    assert "boom" in str(excinfo.value)


def test_non_json_error_body():
    handler = lambda request: httpx.Response(500, text="Internal Server Error")

    with pytest.raises(TranscriptionHTTPError) as excinfo:
        asyncio.run(_transcriber(handler).transcribe(b"x", "en"))

    assert excinfo.value.status_code == 500


def test_unreachable_endpoint_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TranscriptionTransportError):
        asyncio.run(_transcriber(handler).transcribe(b"x", "en"))


@pytest.mark.parametrize("response", [
    httpx.Response(200, text="<html>gateway</html>"),
    httpx.Response(200, json=["not", "an", "object"]),
    httpx.Response(200, json={"transcript": {"text": "nested"}}),
])
def test_malformed_success_body_is_http_error(response):
    with pytest.raises(TranscriptionHTTPError) as excinfo:
        asyncio.run(_transcriber(lambda request: response).transcribe(b"x", "en"))

    assert excinfo.value.status_code == 200
    assert "Malformed" in str(excinfo.value)
