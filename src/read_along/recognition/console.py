"""Console recognition engine.

Treats each typed line as a newly recognized stretch of speech. Lines
accumulate into result slots, so every notification carries the whole
transcript so far, the same way a continuous recognizer reports.
"""

from __future__ import annotations

import sys
from typing import TextIO

from read_along.recognition.base import (
    RecognitionAlternative,
    RecognitionEngine,
    RecognitionEvent,
    RecognitionResult,
)


class ConsoleEngine(RecognitionEngine):
    """Reads transcript lines from a text stream.

    A blank line or end of input ends the listening session.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        prompt: str = "",
        output: TextIO | None = None,
    ):
        """Initialize the engine.

        Args:
            stream: Input stream (defaults to stdin)
            prompt: Text written before each line is read
            output: Where the prompt is written (defaults to stdout)
        """
        super().__init__()
        self.stream = stream
        self.prompt = prompt
        self.output = output
        self.running = False
        self._slots: list[RecognitionResult] = []

    @property
    def name(self) -> str:
        return "console"

    def start(self) -> None:
        stream = self.stream or sys.stdin
        output = self.output or sys.stdout
        self.running = True
        self._slots = []

        while self.running:
            if self.prompt:
                output.write(self.prompt)
                output.flush()
            line = stream.readline()
            text = line.strip()
            if not text:
                break

            # Slots are concatenated as-is, so later ones carry their separator
            if self._slots:
                text = " " + text
            self._slots.append(
                RecognitionResult(alternatives=[RecognitionAlternative(text)], is_final=True)
            )
            self._emit_result(RecognitionEvent(results=list(self._slots)))

        self.stop()

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self._emit_end()
