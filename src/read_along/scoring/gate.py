"""Minimum inter-word timing gate.

Some recognizers fire the same word twice in quick succession. When a
minimum interval is configured, spoken tokens that first appeared less
than that interval after the previously accepted token are dropped
before alignment. Words delivered together in one event share an
arrival time, so only the first of them passes an active gate.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence


class WordTimingGate:
    """Filters a cumulative spoken-token sequence by arrival time.

    Arrival times are recorded once per token position and kept until
    the transcript shrinks below that position, so replaying the same
    transcript gives the same result.
    """

    def __init__(
        self,
        min_interval_ms: int = 0,
        clock: Callable[[], float] | None = None,
    ):
        """Initialize the gate.

        Args:
            min_interval_ms: Minimum spacing between accepted words; 0 disables
            clock: Monotonic clock returning seconds
        """
        self.min_interval_ms = min_interval_ms
        self._clock = clock or time.monotonic
        self._arrivals: list[float] = []

    @property
    def enabled(self) -> bool:
        return self.min_interval_ms > 0

    def reset(self) -> None:
        """Forget all recorded arrival times."""
        self._arrivals.clear()

    def filter(self, words: Sequence[str]) -> list[str]:
        """Return the words that pass the gate, in order."""
        del self._arrivals[len(words):]
        if len(self._arrivals) < len(words):
            now = self._clock()
            self._arrivals.extend([now] * (len(words) - len(self._arrivals)))

        if not self.enabled:
            return list(words)

        interval = self.min_interval_ms / 1000.0
        accepted: list[str] = []
        last_accepted: float | None = None
        for word, arrived in zip(words, self._arrivals):
            if last_accepted is None or arrived - last_accepted >= interval:
                accepted.append(word)
                last_accepted = arrived
        return accepted
