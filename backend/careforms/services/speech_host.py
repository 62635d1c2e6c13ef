"""Host facilities the voice capture component runs on.

A host provides an optional continuous speech recognizer, exclusive
microphone access, and an audio recorder. All callbacks are invoked on
the event loop that drives the capture component.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Callable, List, Sequence


@dataclass(frozen=True)
class RecognitionResult:
    transcript: str
    is_final: bool
    confidence: float = 0.0


@dataclass(frozen=True)
class RecognitionEvent:
    """Results delivered by the recognizer; only those from ``result_index`` on are new."""
    results: Sequence[RecognitionResult]
    result_index: int = 0


class SpeechRecognizer(ABC):
    """Continuous recognition session with event callbacks."""

    continuous: bool = False
    interim_results: bool = False
    lang: str = "en-US"

    on_result: Optional[Callable[[RecognitionEvent], None]] = None
    # Receives an error code such as "not-allowed", "no-speech" or "network"
    on_error: Optional[Callable[[str], None]] = None
    on_end: Optional[Callable[[], None]] = None

    @abstractmethod
    def start(self) -> None:
        """Begin recognition; raises if a session is already running."""

    @abstractmethod
    def stop(self) -> None:
        """Ask the recognizer to stop; ``on_end`` follows."""


class MediaTrack(ABC):
    @abstractmethod
    def stop(self) -> None:
        """Release the underlying device."""


class MediaStream(ABC):
    @abstractmethod
    def get_tracks(self) -> List[MediaTrack]:
        pass


class AudioRecorder(ABC):
    """Encodes a media stream into chunks delivered via ``on_data_available``."""

    mime_type: str = "audio/webm"
    on_data_available: Optional[Callable[[bytes], None]] = None

    @abstractmethod
    def start(self, timeslice_ms: int) -> None:
        """Start recording, emitting a chunk every ``timeslice_ms``."""

    @abstractmethod
    async def stop(self) -> None:
        """Finish recording; the final chunk is delivered before this returns."""

    @abstractmethod
    def abort(self) -> None:
        """Stop immediately, discarding anything not yet delivered."""


class SpeechHost(ABC):

    @abstractmethod
    def create_recognizer(self) -> Optional[SpeechRecognizer]:
        """Return a recognizer, or None when the host has no native recognition."""

    @abstractmethod
    async def open_microphone(self) -> MediaStream:
        """
        Acquire exclusive microphone access.

        Raises ``PermissionError`` when access is refused and ``OSError``
        when no input device is available.
        """

    @abstractmethod
    def create_recorder(self, stream: MediaStream) -> AudioRecorder:
        pass
