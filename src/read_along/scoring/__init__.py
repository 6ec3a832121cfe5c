"""Scoring module for read-along.

Aligns transcripts against the passage, applies manual corrections and
derives the accuracy score.
"""

from read_along.scoring.aligner import align_transcript, apply_correction
from read_along.scoring.gate import WordTimingGate
from read_along.scoring.score import (
    ScoreSummary,
    calculate_score,
    missed_words,
    next_word_index,
    score_feedback,
    summarize,
)

__all__ = [
    "align_transcript",
    "apply_correction",
    "WordTimingGate",
    "ScoreSummary",
    "calculate_score",
    "missed_words",
    "next_word_index",
    "score_feedback",
    "summarize",
]
