"""Passage library for read-along.

Holds the fixed list of practice passages and tracks which one is active.
"""

from __future__ import annotations

import random

from read_along.errors import ConfigurationError, ValidationError

DEFAULT_PASSAGES = [
    "Dyslexia is a learning difference that affects reading, writing, and spelling. "
    "With the right support, everyone can improve their reading skills.",
    "Mathematics can be fun and challenging. Practice makes perfect, and everyone "
    "can learn to solve problems with patience and effort.",
    "Writing is a powerful way to express ideas. With practice, spelling and grammar "
    "can improve, making communication easier.",
    "Reading aloud helps build confidence and fluency. Take your time and enjoy the "
    "story as you read each word clearly.",
]


class PassageLibrary:
    """Ordered, fixed list of passages with one active at a time.

    Reselection on reset never repeats the active passage when there is
    more than one to choose from.
    """

    def __init__(
        self,
        passages: list[str],
        active: int = 0,
        rng: random.Random | None = None,
    ):
        """Initialize the library.

        Args:
            passages: Candidate passages, in display order
            active: Index of the initially active passage
            rng: Random source used for reselection

        Raises:
            ConfigurationError: If there are no passages
            ValidationError: If active is out of range
        """
        if not passages:
            raise ConfigurationError("At least one passage is required")
        self._passages = list(passages)
        self._rng = rng or random.Random()
        self._active = 0
        self.select(active)

    def __len__(self) -> int:
        return len(self._passages)

    @property
    def passages(self) -> list[str]:
        """All passages, in order."""
        return list(self._passages)

    @property
    def active_index(self) -> int:
        """Index of the active passage."""
        return self._active

    @property
    def active(self) -> str:
        """Text of the active passage."""
        return self._passages[self._active]

    def select(self, index: int) -> str:
        """Make a specific passage active.

        Raises:
            ValidationError: If index is out of range
        """
        if not 0 <= index < len(self._passages):
            raise ValidationError(
                f"Passage index {index} out of range",
                context={"passages": len(self._passages)},
            )
        self._active = index
        return self.active

    def reselect(self) -> str:
        """Pick a new active passage uniformly among the others.

        Falls back to the same passage when only one exists.
        """
        if len(self._passages) > 1:
            choices = [i for i in range(len(self._passages)) if i != self._active]
            self._active = self._rng.choice(choices)
        return self.active
