"""Base classes for speech recognition engines.

Defines the narrow interface a practice session needs from a
recognizer, and the payloads it delivers. Real engines sit behind an
adapter implementing RecognitionEngine; tests use a scripted fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from read_along.errors import RecognitionUnavailableError
from read_along.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RecognitionAlternative:
    """One candidate transcription of a result slot."""

    transcript: str
    confidence: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"transcript": self.transcript, "confidence": self.confidence}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecognitionAlternative":
        """Create from dictionary."""
        return cls(
            transcript=data["transcript"],
            confidence=data.get("confidence", 1.0),
        )


@dataclass
class RecognitionResult:
    """A result slot: alternatives for one stretch of speech."""

    alternatives: list[RecognitionAlternative] = field(default_factory=list)
    is_final: bool = False

    @property
    def best(self) -> RecognitionAlternative | None:
        """Topmost alternative, if any."""
        return self.alternatives[0] if self.alternatives else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "alternatives": [a.to_dict() for a in self.alternatives],
            "is_final": self.is_final,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str) -> "RecognitionResult":
        """Create from dictionary, or from a bare transcript string."""
        if isinstance(data, str):
            return cls(alternatives=[RecognitionAlternative(data)], is_final=True)
        return cls(
            alternatives=[RecognitionAlternative.from_dict(a) for a in data.get("alternatives", [])],
            is_final=data.get("is_final", False),
        )


@dataclass
class RecognitionEvent:
    """A result notification carrying every result slot so far."""

    results: list[RecognitionResult] = field(default_factory=list)

    @property
    def transcript(self) -> str:
        """Cumulative transcript: topmost alternative of each slot, concatenated."""
        return "".join(r.best.transcript for r in self.results if r.best is not None)

    @property
    def is_final(self) -> bool:
        """Whether the last slot is final."""
        return bool(self.results) and self.results[-1].is_final


@dataclass
class RecognitionError:
    """An error notification from the engine."""

    code: str
    message: str = ""


ResultCallback = Callable[[RecognitionEvent], None]
EndCallback = Callable[[], None]
ErrorCallback = Callable[[RecognitionError], None]


class RecognitionEngine(ABC):
    """Abstract base class for speech recognition engines.

    Engines emit zero or more result notifications followed by at most
    one end notification per listening session. Callbacks run
    synchronously, in delivery order.
    """

    def __init__(self) -> None:
        self.language = "en-US"
        self.continuous = True
        self.interim_results = True
        self._result_callbacks: list[ResultCallback] = []
        self._end_callbacks: list[EndCallback] = []
        self._error_callbacks: list[ErrorCallback] = []

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the engine name."""
        pass

    @abstractmethod
    def start(self) -> None:
        """Begin listening."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop listening. Safe to call when already stopped."""
        pass

    def is_available(self) -> bool:
        """Check if the engine can be used in this environment.

        Returns:
            True if the engine can be started
        """
        return True

    def configure(
        self,
        language: str = "en-US",
        continuous: bool = True,
        interim_results: bool = True,
    ) -> None:
        """Set the language tag and streaming flags.

        Args:
            language: BCP 47 language tag (e.g., "en-US")
            continuous: Keep listening across pauses
            interim_results: Deliver partial results before final ones
        """
        self.language = language
        self.continuous = continuous
        self.interim_results = interim_results

    def on_result(self, callback: ResultCallback) -> None:
        """Register a callback for result notifications."""
        self._result_callbacks.append(callback)

    def on_end(self, callback: EndCallback) -> None:
        """Register a callback for the end notification."""
        self._end_callbacks.append(callback)

    def on_error(self, callback: ErrorCallback) -> None:
        """Register a callback for error notifications."""
        self._error_callbacks.append(callback)

    def clear_callbacks(self) -> None:
        """Drop every registered callback."""
        self._result_callbacks.clear()
        self._end_callbacks.clear()
        self._error_callbacks.clear()

    def _emit_result(self, event: RecognitionEvent) -> None:
        for callback in list(self._result_callbacks):
            callback(event)

    def _emit_end(self) -> None:
        for callback in list(self._end_callbacks):
            callback()

    def _emit_error(self, error: RecognitionError) -> None:
        logger.warning(
            f"{self.name} reported an error: {error.code}",
            extra={"engine": self.name, "code": error.code},
        )
        for callback in list(self._error_callbacks):
            callback(error)


class UnavailableEngine(RecognitionEngine):
    """Stand-in used when no speech recognition is installed."""

    @property
    def name(self) -> str:
        return "unavailable"

    def is_available(self) -> bool:
        return False

    def start(self) -> None:
        raise RecognitionUnavailableError()

    def stop(self) -> None:
        pass
