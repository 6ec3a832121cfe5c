"""Data models for read-along.

Exports the word-level models and the passage library.
"""

from read_along.models.passage import DEFAULT_PASSAGES, PassageLibrary
from read_along.models.word_state import ReferenceToken, WordState, initial_word_states

__all__ = [
    "DEFAULT_PASSAGES",
    "PassageLibrary",
    "ReferenceToken",
    "WordState",
    "initial_word_states",
]
