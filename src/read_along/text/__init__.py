"""Text module for read-along.

Provides tokenization of passages and transcripts plus the fuzzy
word matching used when comparing them.
"""

from read_along.text.distance import COMMON_VARIANTS, fuzzy_equal, levenshtein_distance
from read_along.text.tokenizer import (
    build_reference,
    normalize_token,
    split_display_tokens,
    tokenize_transcript,
)

__all__ = [
    "COMMON_VARIANTS",
    "fuzzy_equal",
    "levenshtein_distance",
    "build_reference",
    "normalize_token",
    "split_display_tokens",
    "tokenize_transcript",
]
