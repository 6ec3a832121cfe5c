"""Tokenization and normalization of passages and transcripts.

Reference text is split into display tokens that keep their whitespace
runs, so joining the tokens gives back the original text. Transcripts
are split into normalized spoken tokens only.
"""

from __future__ import annotations

import re

from read_along.models.word_state import ReferenceToken

_WHITESPACE_SPLIT = re.compile(r"(\s+)")
_NON_LETTERS = re.compile(r"[^a-z]")


def split_display_tokens(text: str) -> list[str]:
    """Split passage text into words and whitespace runs.

    Example: "Hello,  world." -> ["Hello,", "  ", "world."]

    Args:
        text: Passage text

    Returns:
        Tokens whose concatenation equals the input
    """
    return [token for token in _WHITESPACE_SPLIT.split(text) if token]


def normalize_token(token: str) -> str:
    """Lowercase a token and drop everything except ASCII letters.

    Digits, punctuation and non-ASCII letters are removed entirely.
    """
    return _NON_LETTERS.sub("", token.lower())


def tokenize_transcript(transcript: str) -> list[str]:
    """Split a transcript into normalized spoken tokens.

    Tokens that normalize to an empty string are kept so that every
    recognized word still occupies one position.
    """
    stripped = transcript.strip()
    if not stripped:
        return []
    return [normalize_token(word) for word in stripped.split()]


def build_reference(text: str) -> list[ReferenceToken]:
    """Derive the reference tokens for a passage."""
    tokens: list[ReferenceToken] = []
    position = 0
    for display_index, raw in enumerate(split_display_tokens(text)):
        if raw.strip():
            tokens.append(
                ReferenceToken(
                    text=raw,
                    normalized=normalize_token(raw),
                    display_index=display_index,
                    position=position,
                )
            )
            position += 1
        else:
            tokens.append(ReferenceToken(text=raw, normalized="", display_index=display_index))
    return tokens
