"""Recognition module for read-along.

Provides the speech recognition engine interface, its notification
payloads, and adapters for scripted replay and typed console input.
"""

from read_along.recognition.base import (
    RecognitionAlternative,
    RecognitionEngine,
    RecognitionError,
    RecognitionEvent,
    RecognitionResult,
    UnavailableEngine,
)
from read_along.recognition.console import ConsoleEngine
from read_along.recognition.scripted import ScriptedEngine, ScriptStep

__all__ = [
    "RecognitionAlternative",
    "RecognitionEngine",
    "RecognitionError",
    "RecognitionEvent",
    "RecognitionResult",
    "UnavailableEngine",
    "ConsoleEngine",
    "ScriptedEngine",
    "ScriptStep",
]
