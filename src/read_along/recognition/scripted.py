"""Scripted recognition engine.

Replays a fixed sequence of result, error and end notifications. Used
for deterministic tests and by `read-along replay`.

Script file format (JSON):

    {
      "steps": [
        {"type": "result", "results": ["reading aloud"]},
        {"type": "result", "results": ["reading aloud", " helps build"]},
        {"type": "error", "code": "network"},
        {"type": "end"}
      ]
    }

Each entry of "results" is either a transcript string (one final slot
with a single alternative) or a full result dictionary with
"alternatives" and "is_final".
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from read_along.errors import ConfigurationError, ResourceError
from read_along.recognition.base import (
    RecognitionEngine,
    RecognitionError,
    RecognitionEvent,
    RecognitionResult,
)

STEP_TYPES = ("result", "error", "end")


@dataclass
class ScriptStep:
    """One scripted notification."""

    type: str
    results: list[RecognitionResult] = field(default_factory=list)
    code: str = ""

    @classmethod
    def result(cls, *transcripts: str) -> "ScriptStep":
        """Result step with one final slot per transcript string."""
        return cls(type="result", results=[RecognitionResult.from_dict(t) for t in transcripts])

    @classmethod
    def error(cls, code: str) -> "ScriptStep":
        """Error step."""
        return cls(type="error", code=code)

    @classmethod
    def end(cls) -> "ScriptStep":
        """End step."""
        return cls(type="end")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScriptStep":
        """Create from dictionary.

        Raises:
            ConfigurationError: If the step type is unknown
        """
        step_type = data.get("type")
        if step_type not in STEP_TYPES:
            raise ConfigurationError(
                f"Unknown script step type: {step_type!r}",
                context={"expected": ", ".join(STEP_TYPES)},
            )
        return cls(
            type=step_type,
            results=[RecognitionResult.from_dict(r) for r in data.get("results", [])],
            code=data.get("code", ""),
        )


class ScriptedEngine(RecognitionEngine):
    """Fake engine emitting scripted notifications.

    With autoplay, start() replays every step synchronously; otherwise
    call advance() to emit one step at a time. Stopping the engine ends
    the replay and emits the end notification once.
    """

    def __init__(
        self,
        steps: list[ScriptStep] | None = None,
        autoplay: bool = True,
        available: bool = True,
    ):
        super().__init__()
        self.steps = list(steps or [])
        self.autoplay = autoplay
        self.available = available
        self.running = False
        self.start_count = 0
        self._position = 0

    @property
    def name(self) -> str:
        return "scripted"

    @property
    def remaining(self) -> int:
        """Steps not yet emitted."""
        return len(self.steps) - self._position

    def is_available(self) -> bool:
        return self.available

    def start(self) -> None:
        self.running = True
        self.start_count += 1
        if self.autoplay:
            while self.running and self.advance():
                pass

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self._emit_end()

    def advance(self) -> bool:
        """Emit the next step.

        Returns:
            False when the engine is stopped or the script is exhausted
        """
        if not self.running or self._position >= len(self.steps):
            return False

        step = self.steps[self._position]
        self._position += 1

        if step.type == "result":
            self._emit_result(RecognitionEvent(results=list(step.results)))
        elif step.type == "error":
            self._emit_error(RecognitionError(code=step.code))
        else:
            self.stop()
        return True

    @classmethod
    def from_file(cls, path: Path | str, **kwargs: Any) -> "ScriptedEngine":
        """Load a script from a JSON file.

        Raises:
            ResourceError: If the file does not exist
            ConfigurationError: If the file is not a valid script
        """
        path = Path(path)
        if not path.exists():
            raise ResourceError(f"Replay script not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid replay script: {e}", context={"path": str(path)}) from e

        if not isinstance(data, dict) or not isinstance(data.get("steps"), list):
            raise ConfigurationError("Replay script needs a 'steps' list", context={"path": str(path)})

        try:
            steps = [ScriptStep.from_dict(s) for s in data["steps"]]
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigurationError(
                f"Malformed replay script step: {e!r}", context={"path": str(path)}
            ) from e

        return cls(steps=steps, **kwargs)
