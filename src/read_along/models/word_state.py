"""Word-level models for read-along.

A passage is split once into ReferenceTokens; each token gets a
WordState that the aligner replaces on every transcript event.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class ReferenceToken(BaseModel):
    """One unit of the reference passage: a word or a whitespace run."""

    model_config = ConfigDict(frozen=True)

    text: str  # Raw display text
    normalized: str  # Lowercase, ASCII letters only ("" for whitespace)
    display_index: int  # Index among all split tokens
    position: int | None = None  # Index among non-blank tokens, None for whitespace

    @property
    def is_blank(self) -> bool:
        """Whether this token is a whitespace run."""
        return not self.text.strip()


class WordState(BaseModel):
    """Classification of one display token.

    Whitespace tokens stay unattempted forever; word tokens move between
    unattempted, correct and wrong as the transcript changes.
    """

    model_config = ConfigDict(frozen=True)

    word: str
    attempted: bool = False
    correct: bool = False
    wrong: bool = False

    @model_validator(mode="after")
    def _check_flags(self) -> "WordState":
        if self.correct and self.wrong:
            raise ValueError("a word cannot be both correct and wrong")
        if self.is_blank and (self.attempted or self.correct or self.wrong):
            raise ValueError("whitespace tokens are never attempted")
        return self

    @property
    def is_blank(self) -> bool:
        """Whether the display text is whitespace only."""
        return not self.word.strip()

    def mark(self, correct: bool) -> "WordState":
        """Return an attempted copy marked correct or wrong."""
        return self.model_copy(update={"attempted": True, "correct": correct, "wrong": not correct})

    def cleared(self) -> "WordState":
        """Return an unattempted copy."""
        return self.model_copy(update={"attempted": False, "correct": False, "wrong": False})


def initial_word_states(reference: list[ReferenceToken]) -> list[WordState]:
    """Create the unattempted baseline for a passage."""
    return [WordState(word=token.text) for token in reference]
