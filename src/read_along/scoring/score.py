"""Accuracy score and feedback derived from word states.

Nothing here is stored; every value is a pure function of the current
word state collection.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from read_along.models.word_state import WordState

FEEDBACK_PERFECT = "Excellent! You read every word correctly."
FEEDBACK_HIGH = "Very good! Just a few words missed."
FEEDBACK_MEDIUM = "Good effort! Keep practicing to improve your accuracy."
FEEDBACK_LOW = "Keep practicing. Try reading slowly and clearly."


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_score(states: Sequence[WordState]) -> int:
    """Percentage of attempted words that were read correctly.

    Returns:
        Integer in [0, 100]; 0 when nothing has been attempted
    """
    correct = 0
    wrong = 0
    for state in states:
        if state.is_blank or not state.attempted:
            continue
        if state.correct:
            correct += 1
        elif state.wrong:
            wrong += 1

    if correct + wrong == 0:
        return 0
    return _round_half_up(correct / (correct + wrong) * 100)


def score_feedback(score: int | None) -> str:
    """Qualitative feedback for a final score."""
    if score is None:
        return ""
    if score == 100:
        return FEEDBACK_PERFECT
    if score >= 80:
        return FEEDBACK_HIGH
    if score >= 50:
        return FEEDBACK_MEDIUM
    return FEEDBACK_LOW


def missed_words(states: Sequence[WordState]) -> list[str]:
    """Words to practice: attempted and wrong, in passage order."""
    return [s.word.strip() for s in states if s.attempted and s.wrong and not s.is_blank]


def next_word_index(states: Sequence[WordState]) -> int | None:
    """Display index of the first word not yet attempted."""
    for index, state in enumerate(states):
        if not state.is_blank and not state.attempted:
            return index
    return None


@dataclass
class ScoreSummary:
    """Snapshot of a session's progress.

    Attributes:
        score: Accuracy percentage
        correct: Words read correctly
        wrong: Words read incorrectly
        total_words: Non-blank words in the passage
        missed_words: Wrong words, for practice
        next_word_index: Display index of the next word to read
    """

    score: int
    correct: int
    wrong: int
    total_words: int
    missed_words: list[str] = field(default_factory=list)
    next_word_index: int | None = None

    @property
    def attempted(self) -> int:
        """Words attempted so far."""
        return self.correct + self.wrong

    @property
    def words_read(self) -> int:
        """Words read correctly (shown as "Words read: x/y")."""
        return self.correct

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "score": self.score,
            "correct": self.correct,
            "wrong": self.wrong,
            "attempted": self.attempted,
            "total_words": self.total_words,
            "missed_words": self.missed_words,
            "next_word_index": self.next_word_index,
        }


def summarize(states: Sequence[WordState]) -> ScoreSummary:
    """Collect score and progress counters for a word state collection."""
    words = [s for s in states if not s.is_blank]
    return ScoreSummary(
        score=calculate_score(states),
        correct=sum(1 for s in words if s.attempted and s.correct),
        wrong=sum(1 for s in words if s.attempted and s.wrong),
        total_words=len(words),
        missed_words=missed_words(states),
        next_word_index=next_word_index(states),
    )
