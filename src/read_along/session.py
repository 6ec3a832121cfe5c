"""Reading practice session.

A PracticeSession owns one recognition engine handle, the passage
library and the word state collection of the active passage. Engine
notifications arrive through callbacks and are processed synchronously
in delivery order; each one replaces the word state collection as a
whole.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from uuid import uuid4

from read_along.config import PracticeConfig, default_config
from read_along.errors import (
    CAPABILITY_ABSENT_MESSAGE,
    EngineError,
    RecognitionUnavailableError,
    ValidationError,
)
from read_along.logging import get_logger
from read_along.models.passage import PassageLibrary
from read_along.models.word_state import ReferenceToken, WordState, initial_word_states
from read_along.recognition.base import RecognitionEngine, RecognitionError, RecognitionEvent
from read_along.scoring.aligner import align_transcript, apply_correction
from read_along.scoring.gate import WordTimingGate
from read_along.scoring.score import ScoreSummary, calculate_score, score_feedback, summarize
from read_along.text.tokenizer import build_reference, tokenize_transcript

logger = get_logger(__name__)

STATUS_LISTENING = "Listening... Read the text aloud."
STATUS_STOPPED = "Stopped. Start again to continue reading."

SessionListener = Callable[["PracticeSession"], None]


def generate_session_id() -> str:
    """Generate a short session ID for log records."""
    return str(uuid4())[:8]


class PracticeSession:
    """One reader practicing against one passage at a time.

    Attributes:
        engine: Recognition engine adapter
        config: Practice configuration
        library: Passage library
        reference: Reference tokens of the active passage
        word_states: Current word states, one per reference token
        score: Latest score, or None before any scoring
        feedback: User-facing feedback or error message
        status: Short listening status line
        listening: Whether the engine is currently listening
        editing_index: Word being corrected, if any
        available: Whether speech recognition can be used at all
    """

    def __init__(
        self,
        engine: RecognitionEngine,
        config: PracticeConfig | None = None,
        library: PassageLibrary | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.engine = engine
        self.config = config or default_config()
        self.library = library or PassageLibrary(
            self.config.passages,
            active=self.config.initial_passage,
            rng=rng,
        )
        self.session_id = generate_session_id()

        self._gate = WordTimingGate(self.config.recognition.min_word_interval_ms, clock)
        self._handle: RecognitionEngine | None = None
        self._listeners: list[SessionListener] = []

        self.listening = False
        self.editing_index: int | None = None
        self.score: int | None = None
        self.feedback = ""
        self.status = ""
        self.transcript = ""

        self.available = engine.is_available()
        if not self.available:
            self.status = CAPABILITY_ABSENT_MESSAGE
            logger.warning(
                "Speech recognition unavailable, listening disabled",
                extra={"session": self.session_id, "engine": engine.name},
            )

        self._load_passage()

    # -- derived values -------------------------------------------------

    @property
    def passage(self) -> str:
        """Text of the active passage."""
        return self.library.active

    @property
    def summary(self) -> ScoreSummary:
        """Score and progress counters for the current word states."""
        return summarize(self.word_states)

    def subscribe(self, listener: SessionListener) -> None:
        """Call listener after every state change."""
        self._listeners.append(listener)

    # -- listening ------------------------------------------------------

    def start_listening(self) -> bool:
        """Start a listening session on the engine.

        Returns:
            False if recognition is unavailable or already listening
        """
        if not self.available:
            self.feedback = CAPABILITY_ABSENT_MESSAGE
            self._notify()
            return False
        if self.listening:
            return False

        self.feedback = ""
        self.score = None
        self.transcript = ""
        self._gate.reset()

        settings = self.config.recognition
        self.engine.configure(
            language=settings.language,
            continuous=settings.continuous,
            interim_results=settings.interim_results,
        )
        self.engine.clear_callbacks()
        self.engine.on_result(self._on_result)
        self.engine.on_end(self.handle_end)
        self.engine.on_error(self.handle_error)

        self._handle = self.engine
        self.listening = True
        self.status = STATUS_LISTENING
        logger.info(
            "Listening started",
            extra={"session": self.session_id, "passage": self.library.active_index},
        )
        self._notify()

        try:
            self.engine.start()
        except RecognitionUnavailableError as e:
            self._release_engine(stop=False)
            self.listening = False
            self.available = False
            self.status = e.message
            self.feedback = e.message
            self._notify()
            return False
        return True

    def stop_listening(self) -> None:
        """Stop listening and finalize the score.

        Safe to call when already stopped.
        """
        self._release_engine(stop=True)
        self.listening = False
        if self.available:
            self.status = STATUS_STOPPED
        self.score = calculate_score(self.word_states)
        self.feedback = score_feedback(self.score)
        logger.info(
            "Listening stopped",
            extra={"session": self.session_id, "score": self.score},
        )
        self._notify()

    def handle_transcript(self, transcript: str) -> None:
        """Re-derive every word state from the cumulative transcript."""
        if not self.listening:
            logger.debug("Ignoring transcript while not listening", extra={"session": self.session_id})
            return

        matching = self.config.matching
        spoken = self._gate.filter(tokenize_transcript(transcript))
        self.word_states = align_transcript(
            self.word_states,
            self.reference,
            transcript,
            max_distance=matching.max_edit_distance,
            variants=matching.active_variants(),
            spoken=spoken,
        )
        self.transcript = transcript
        self.score = calculate_score(self.word_states)
        self._notify()

    def handle_error(self, error: RecognitionError | str) -> None:
        """Surface an engine error and stop listening.

        The score is not finalized; the error message stays visible.
        """
        code = error.code if isinstance(error, RecognitionError) else error
        logger.warning(
            f"Recognition error: {code}",
            extra={"session": self.session_id, "code": code},
        )
        self._release_engine(stop=True)
        self.listening = False
        self.status = STATUS_STOPPED
        self.feedback = EngineError(code).message
        self._notify()

    def handle_end(self) -> None:
        """Engine ended the listening session on its own."""
        if not self.listening:
            return
        self._release_engine(stop=False)
        self.listening = False
        self.status = STATUS_STOPPED
        self._notify()

    # -- manual correction ----------------------------------------------

    def begin_edit(self, index: int) -> bool:
        """Enter edit mode for a word marked wrong.

        Returns:
            False (and leaves edit mode) if the word is not wrong

        Raises:
            ValidationError: If index is outside the passage
        """
        self._check_index(index)
        if self.word_states[index].wrong:
            self.editing_index = index
            return True
        self.editing_index = None
        return False

    def cancel_edit(self) -> None:
        """Leave edit mode without changes."""
        self.editing_index = None

    def submit_edit(self, text: str) -> bool:
        """Apply the typed correction to the word in edit mode.

        Returns:
            True if the word is now correct
        """
        index = self.editing_index
        self.editing_index = None
        if index is None or not self.word_states[index].wrong:
            return False

        self.word_states = apply_correction(self.word_states, self.reference, index, text)
        self.score = calculate_score(self.word_states)
        self.feedback = score_feedback(self.score)
        self._notify()
        return self.word_states[index].correct

    def edit_word(self, index: int, text: str) -> bool:
        """Begin and submit an edit in one step."""
        if not self.begin_edit(index):
            return False
        return self.submit_edit(text)

    # -- passage management ---------------------------------------------

    def reset(self) -> None:
        """Switch to another passage and start over."""
        self._release_engine(stop=True)
        self.listening = False
        self.library.reselect()
        self._load_passage()
        self.score = None
        self.feedback = ""
        self.status = "" if self.available else CAPABILITY_ABSENT_MESSAGE
        logger.info(
            "Session reset",
            extra={"session": self.session_id, "passage": self.library.active_index},
        )
        self._notify()

    def select_passage(self, index: int) -> None:
        """Make a specific passage active, discarding progress."""
        self._release_engine(stop=True)
        self.listening = False
        self.library.select(index)
        self._load_passage()
        self.score = None
        self.feedback = ""
        self.status = "" if self.available else CAPABILITY_ABSENT_MESSAGE
        self._notify()

    # -- internals ------------------------------------------------------

    def _load_passage(self) -> None:
        self.reference: list[ReferenceToken] = build_reference(self.library.active)
        self.word_states: list[WordState] = initial_word_states(self.reference)
        self.editing_index = None
        self.transcript = ""
        self._gate.reset()

    def _release_engine(self, stop: bool) -> None:
        handle = self._handle
        self._handle = None
        if handle is None:
            return
        # Drop callbacks first so the engine's end notification is not fed back
        handle.clear_callbacks()
        if stop:
            handle.stop()

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.word_states):
            raise ValidationError(
                f"Word index {index} out of range",
                context={"words": len(self.word_states)},
            )

    def _on_result(self, event: RecognitionEvent) -> None:
        self.handle_transcript(event.transcript)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
