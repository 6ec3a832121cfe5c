"""Read Along - Reading-aloud practice scoring.

Aligns a live, cumulative speech transcript against a reference passage,
marking each word correct, wrong or not yet attempted, and keeps a
running accuracy score.
"""

__version__ = "0.1.0"
