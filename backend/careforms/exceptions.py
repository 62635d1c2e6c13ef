"""Domain exceptions for the form engine and voice capture."""

from enum import Enum as PyEnum


class UnsupportedFieldTypeError(Exception):
    """Raised when a field type has no renderer."""

    def __init__(self, field_type):
        self.field_type = field_type
        super().__init__(f"Unsupported field type: {field_type}")


class PersistenceError(Exception):
    """Raised when saving or submitting a form response fails."""


class SpeechCaptureErrorKind(str, PyEnum):
    """Failure kinds surfaced by the voice capture component."""
    PERMISSION_DENIED = "permission_denied"
    NO_SPEECH_DETECTED = "no_speech_detected"
    NETWORK_ERROR = "network_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    UNKNOWN = "unknown"


SPEECH_ERROR_MESSAGES = {
    SpeechCaptureErrorKind.PERMISSION_DENIED: "Please allow microphone access in your browser settings",
    SpeechCaptureErrorKind.NO_SPEECH_DETECTED: "No speech detected. Please try again.",
    SpeechCaptureErrorKind.NETWORK_ERROR: "Network error. Check your connection.",
    SpeechCaptureErrorKind.SERVICE_UNAVAILABLE: (
        "Cloud transcription service not configured. "
        "Use a browser with built-in speech recognition for voice input."
    ),
    SpeechCaptureErrorKind.UNKNOWN: "Speech recognition error. Please try again.",
}


class SpeechCaptureError(Exception):
    """A capture failure, held by the component rather than raised to callers."""

    def __init__(self, kind: SpeechCaptureErrorKind, detail: str = None):
        self.kind = kind
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return SPEECH_ERROR_MESSAGES[self.kind]

    def __repr__(self) -> str:
        return f"<SpeechCaptureError(kind='{self.kind.value}', detail={self.detail!r})>"


class TranscriptionHTTPError(Exception):
    """The transcription endpoint answered with a non-success status."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"Transcription request failed with status {status_code}")


class TranscriptionTransportError(Exception):
    """The transcription endpoint could not be reached."""
