"""Positional alignment of a cumulative transcript against a passage.

Every recognition event re-sends the whole transcript so far, so word
states are recomputed from scratch on each call instead of diffed.
Spoken tokens are consumed strictly left to right, one per reference
word, whether or not they match. An insertion or omission shifts
every later comparison.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from read_along.errors import ValidationError
from read_along.logging import get_logger
from read_along.models.word_state import ReferenceToken, WordState
from read_along.text.distance import fuzzy_equal
from read_along.text.tokenizer import normalize_token, tokenize_transcript

logger = get_logger(__name__)


def _check_lengths(states: Sequence[WordState], reference: Sequence[ReferenceToken]) -> None:
    if len(states) != len(reference):
        raise ValidationError(
            "Word states do not belong to this passage",
            context={"states": len(states), "reference": len(reference)},
        )


def align_transcript(
    previous: Sequence[WordState],
    reference: Sequence[ReferenceToken],
    transcript: str,
    *,
    max_distance: int = 1,
    variants: Mapping[str, Sequence[str]] | None = None,
    spoken: Sequence[str] | None = None,
) -> list[WordState]:
    """Recompute every word state from the full transcript.

    Args:
        previous: Current word states, one per reference token
        reference: Reference tokens of the active passage
        transcript: Cumulative transcript text
        max_distance: Edit distance still accepted as a match
        variants: Optional accepted spellings per reference word
        spoken: Pre-tokenized spoken words, used instead of tokenizing
            the transcript (e.g. after timing filters)

    Returns:
        New list of word states; previous is left untouched

    Raises:
        ValidationError: If previous and reference differ in length
    """
    _check_lengths(previous, reference)
    words = list(spoken) if spoken is not None else tokenize_transcript(transcript)

    cursor = 0
    states: list[WordState] = []
    for token, state in zip(reference, previous):
        if token.is_blank:
            states.append(state)
            continue

        if cursor < len(words):
            matched = fuzzy_equal(words[cursor], token.normalized, max_distance, variants)
            states.append(state.mark(matched))
            cursor += 1
        else:
            # Transcript ran out (or shrank): back to unattempted
            states.append(state.cleared())

    logger.debug(
        "Aligned transcript",
        extra={"spoken_words": len(words), "consumed": cursor},
    )
    return states


def apply_correction(
    states: Sequence[WordState],
    reference: Sequence[ReferenceToken],
    index: int,
    text: str,
) -> list[WordState]:
    """Let the reader retype a word that was marked wrong.

    The typed text must match the reference word exactly after
    normalization. The display text is restored to the reference
    spelling either way. Words that are not currently wrong are left
    alone.

    Raises:
        ValidationError: If index is outside the passage
    """
    _check_lengths(states, reference)
    if not 0 <= index < len(states):
        raise ValidationError(
            f"Word index {index} out of range",
            context={"words": len(states)},
        )

    target = states[index]
    if not target.wrong:
        return list(states)

    token = reference[index]
    matched = normalize_token(text) == token.normalized
    updated = list(states)
    updated[index] = target.mark(matched).model_copy(update={"word": token.text})
    logger.debug("Applied correction", extra={"index": index, "matched": matched})
    return updated
