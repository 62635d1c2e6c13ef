"""Service layer: form engine, voice capture and persistence."""

from careforms.services.template import TemplateService
from careforms.services.response import ResponseService, DatabaseResponseSink
from careforms.services.transcription import TranscriptionService
from careforms.services.form_state import FormStateStore, composite_key, reconstruct_repeat_counts
from careforms.services.validation import validate
from careforms.services.draft import reconcile_draft, strip_reserved_keys
from careforms.services.form_session import FormSession, ResponseSink, SubmitResult
from careforms.services.voice_capture import VoiceCapture, CaptureState, append_text

__all__ = [
    "TemplateService",
    "ResponseService",
    "DatabaseResponseSink",
    "TranscriptionService",
    "FormStateStore",
    "composite_key",
    "reconstruct_repeat_counts",
    "validate",
    "reconcile_draft",
    "strip_reserved_keys",
    "FormSession",
    "ResponseSink",
    "SubmitResult",
    "VoiceCapture",
    "CaptureState",
    "append_text",
]
