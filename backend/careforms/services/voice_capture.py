"""Voice capture component feeding dictated text into a form field.

The component picks its backend once, at construction: native
continuous recognition when the host offers a recognizer, otherwise
cloud fallback (record a clip, upload it, append the transcript).

All host callbacks read the component's own attributes at call time.
``still_listening`` in particular is cleared before any underlying stop
so a late ``end`` event cannot restart a session the caller ended.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum as PyEnum
from typing import Optional, Callable, List, Any

from careforms.config import get_settings
from careforms.exceptions import (
    SpeechCaptureError,
    SpeechCaptureErrorKind,
    TranscriptionHTTPError,
    TranscriptionTransportError,
)
from careforms.services.form_state import FormStateStore
from careforms.services.speech_host import SpeechHost, RecognitionEvent

logger = logging.getLogger(__name__)


class CaptureState(str, PyEnum):
    IDLE = "idle"
    LISTENING_NATIVE = "listening_native"
    LISTENING_CLOUD_FALLBACK = "listening_cloud_fallback"
    ERROR = "error"


LISTENING_STATES = (CaptureState.LISTENING_NATIVE, CaptureState.LISTENING_CLOUD_FALLBACK)

NATIVE_ERROR_CODES = {
    "not-allowed": SpeechCaptureErrorKind.PERMISSION_DENIED,
    "service-not-allowed": SpeechCaptureErrorKind.PERMISSION_DENIED,
    "no-speech": SpeechCaptureErrorKind.NO_SPEECH_DETECTED,
    "network": SpeechCaptureErrorKind.NETWORK_ERROR,
}

SERVICE_NOT_CONFIGURED_STATUS = 503


def append_text(existing: Optional[str], new_text: Optional[str]) -> str:
    """Join dictated text onto a value with a single space."""
    existing = existing or ""
    new_text = (new_text or "").strip()
    if not new_text:
        return existing
    if not existing:
        return new_text
    return f"{existing} {new_text}"


class TextTarget(ABC):
    """The live value the component appends to."""

    @abstractmethod
    def read(self) -> str:
        pass

    @abstractmethod
    def write(self, value: str) -> None:
        pass


class ValueTarget(TextTarget):
    """Standalone holder for use outside a form."""

    def __init__(self, value: str = ""):
        self.value = value

    def read(self) -> str:
        return self.value

    def write(self, value: str) -> None:
        self.value = value


class FieldTextTarget(TextTarget):
    """Binds capture output to one composite key of a form state store."""

    def __init__(
        self,
        store: FormStateStore,
        section_id: str,
        field_id: str,
        instance_index: Optional[int] = None,
    ):
        self.store = store
        self.section_id = section_id
        self.field_id = field_id
        self.instance_index = instance_index

    def read(self) -> str:
        value = self.store.get_value(self.section_id, self.field_id, self.instance_index)
        return value if isinstance(value, str) else ""

    def write(self, value: str) -> None:
        self.store.set_field(self.section_id, self.field_id, value, self.instance_index)


class VoiceCapture:
    """Dictation state machine for one text control."""

    def __init__(
        self,
        host: SpeechHost,
        target: TextTarget,
        transcriber: Any = None,
        language: Optional[str] = None,
    ):
        settings = get_settings()
        self.host = host
        self.target = target
        self.transcriber = transcriber
        self.language = language or settings.speech_language
        self.chunk_interval_ms = settings.speech_chunk_interval_ms
        self.max_auto_restarts = settings.speech_max_auto_restarts

        self.state = CaptureState.IDLE
        self.error: Optional[SpeechCaptureError] = None
        self.interim_text = ""
        self.still_listening = False

        self._disposed = False
        self._starting = False
        self._auto_restarts = 0
        self._listeners: List[Callable[["VoiceCapture"], None]] = []
        self._stream = None
        self._recorder = None
        self._chunks: List[bytes] = []

        # Capability probe: decided once for the lifetime of the component
        self._recognizer = host.create_recognizer()
        if self._recognizer is not None:
            self._recognizer.continuous = True
            self._recognizer.interim_results = True
            self._recognizer.lang = self.language
            self._recognizer.on_result = self._handle_result
            self._recognizer.on_error = self._handle_error
            self._recognizer.on_end = self._handle_end
        else:
            logger.info("No native speech recognizer available; using cloud transcription")

    @property
    def native_capable(self) -> bool:
        return self._recognizer is not None

    @property
    def is_listening(self) -> bool:
        return self.state in LISTENING_STATES

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    def add_listener(self, listener: Callable[["VoiceCapture"], None]) -> None:
        """Register a callback invoked after every state or value change."""
        self._listeners.append(listener)

    async def start(self) -> None:
        if self._disposed:
            raise RuntimeError("Voice capture has been disposed")
        if self.is_listening or self._starting:
            return

        if self.native_capable:
            self._start_native()
        else:
            await self._start_cloud()

    async def stop(self) -> None:
        """End the current session; a no-op when not listening."""
        if self.state == CaptureState.LISTENING_NATIVE:
            self._stop_native()
        elif self.state == CaptureState.LISTENING_CLOUD_FALLBACK and self._recorder is not None:
            await self._stop_cloud()

    def dispose(self) -> None:
        """Tear down: stop any session and release the microphone without uploading."""
        if self._disposed:
            return
        self.still_listening = False
        self._disposed = True

        if self._recognizer is not None:
            try:
                self._recognizer.stop()
            except Exception:
                logger.debug("Recognizer stop during dispose failed", exc_info=True)

        if self._recorder is not None:
            recorder, self._recorder = self._recorder, None
            recorder.abort()
        self._chunks = []
        self._release_stream()

        self.interim_text = ""
        self.state = CaptureState.IDLE
        self._listeners.clear()

    # Native recognition

    def _start_native(self) -> None:
        self._auto_restarts = 0
        self.still_listening = True
        self.error = None
        # Engines may fire error or end from inside start(); they must see a live session
        self._set_state(CaptureState.LISTENING_NATIVE)
        try:
            self._recognizer.start()
        except Exception as e:
            self._fail(SpeechCaptureErrorKind.UNKNOWN, f"failed to start recognition: {e}")

    def _stop_native(self) -> None:
        self.still_listening = False
        try:
            self._recognizer.stop()
        except Exception:
            logger.debug("Recognizer stop failed", exc_info=True)
        self.interim_text = ""
        self._set_state(CaptureState.IDLE)

    def _handle_result(self, event: RecognitionEvent) -> None:
        if self._disposed or self.state != CaptureState.LISTENING_NATIVE:
            return
        self._auto_restarts = 0

        interim = []
        for result in event.results[event.result_index:]:
            if result.is_final:
                self._append(result.transcript)
            else:
                interim.append(result.transcript)
        self.interim_text = "".join(interim)
        self._notify()

    def _handle_error(self, code: str) -> None:
        if self._disposed or self.state != CaptureState.LISTENING_NATIVE:
            return
        self._fail(NATIVE_ERROR_CODES.get(code, SpeechCaptureErrorKind.UNKNOWN), code)

    def _handle_end(self) -> None:
        if self._disposed or not self.still_listening:
            return

        # The counter is bumped before restarting so an engine that re-fires
        # "end" from inside start() still hits the bound.
        if self._auto_restarts >= self.max_auto_restarts:
            self._fail(
                SpeechCaptureErrorKind.NO_SPEECH_DETECTED,
                f"recognizer ended {self._auto_restarts} times without a result"
            )
            return
        self._auto_restarts += 1

        logger.debug("Recognizer ended on its own; restarting (%d)", self._auto_restarts)
        try:
            self._recognizer.start()
        except Exception as e:
            self._fail(SpeechCaptureErrorKind.UNKNOWN, f"failed to restart recognition: {e}")

    # Cloud fallback

    async def _start_cloud(self) -> None:
        self._starting = True
        try:
            stream = await self.host.open_microphone()
        except PermissionError as e:
            self._fail(SpeechCaptureErrorKind.PERMISSION_DENIED, str(e))
            return
        except OSError as e:
            self._fail(SpeechCaptureErrorKind.UNKNOWN, f"microphone unavailable: {e}")
            return
        finally:
            self._starting = False

        if self._disposed:
            for track in stream.get_tracks():
                track.stop()
            return

        self._stream = stream
        self._chunks = []
        recorder = self.host.create_recorder(stream)
        recorder.on_data_available = self._handle_chunk
        try:
            recorder.start(self.chunk_interval_ms)
        except Exception as e:
            self._release_stream()
            self._fail(SpeechCaptureErrorKind.UNKNOWN, f"failed to start recording: {e}")
            return

        self._recorder = recorder
        self.still_listening = True
        self.error = None
        self._set_state(CaptureState.LISTENING_CLOUD_FALLBACK)

    def _handle_chunk(self, chunk: bytes) -> None:
        if self._disposed or not chunk:
            return
        self._chunks.append(chunk)

    async def _stop_cloud(self) -> None:
        self.still_listening = False
        recorder, self._recorder = self._recorder, None
        try:
            await recorder.stop()
        except Exception as e:
            self._chunks = []
            self._fail(SpeechCaptureErrorKind.UNKNOWN, f"failed to finish recording: {e}")
            return
        finally:
            self._release_stream()

        audio = b"".join(self._chunks)
        self._chunks = []
        if not audio:
            self._fail(SpeechCaptureErrorKind.NO_SPEECH_DETECTED, "no audio recorded")
            return

        await self._upload(audio)

    async def _upload(self, audio: bytes) -> None:
        if self.transcriber is None:
            self._fail(SpeechCaptureErrorKind.SERVICE_UNAVAILABLE, "no transcriber configured")
            return

        logger.debug("Uploading %d bytes for transcription (%s)", len(audio), self.language)
        try:
            transcript = await self.transcriber.transcribe(audio, self.language)
        except TranscriptionHTTPError as e:
            if e.status_code == SERVICE_NOT_CONFIGURED_STATUS:
                self._fail(SpeechCaptureErrorKind.SERVICE_UNAVAILABLE, str(e))
            else:
                self._fail(SpeechCaptureErrorKind.UNKNOWN, str(e))
            return
        except TranscriptionTransportError as e:
            self._fail(SpeechCaptureErrorKind.NETWORK_ERROR, str(e))
            return
        except Exception as e:
            logger.exception("Transcription upload failed unexpectedly")
            self._fail(SpeechCaptureErrorKind.UNKNOWN, str(e))
            return

        if self._disposed:
            return
        if not transcript or not transcript.strip():
            self._fail(SpeechCaptureErrorKind.NO_SPEECH_DETECTED, "empty transcript")
            return

        self._append(transcript)
        self._set_state(CaptureState.IDLE)

    # Shared

    def _append(self, text: str) -> None:
        self.target.write(append_text(self.target.read(), text))

    def _release_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        for track in stream.get_tracks():
            track.stop()

    def _fail(self, kind: SpeechCaptureErrorKind, detail: Optional[str] = None) -> None:
        self.still_listening = False
        if self._disposed:
            return
        self.error = SpeechCaptureError(kind, detail)
        self.interim_text = ""
        logger.warning("Voice capture failed: %s (%s)", kind.value, detail)
        self._set_state(CaptureState.ERROR)

    def _set_state(self, state: CaptureState) -> None:
        if state != self.state:
            logger.debug("Voice capture %s -> %s", self.state.value, state.value)
        self.state = state
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def __repr__(self) -> str:
        return f"<VoiceCapture(state='{self.state.value}', native={self.native_capable})>"
