"""Tests for PracticeSession."""

import random

import pytest

from read_along.config import MatchingSettings, PracticeConfig, RecognitionSettings
from read_along.errors import (
    CAPABILITY_ABSENT_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    EngineError,
    ValidationError,
)
from read_along.models.passage import PassageLibrary
from read_along.recognition.base import RecognitionError, UnavailableEngine
from read_along.recognition.scripted import ScriptedEngine, ScriptStep
from read_along.scoring.score import FEEDBACK_HIGH, FEEDBACK_PERFECT
from read_along.session import STATUS_LISTENING, STATUS_STOPPED, PracticeSession

PASSAGE = "Reading aloud helps build confidence."


class FakeClock:
    """Manually advanced clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def make_session(steps=None, autoplay=True, **config_kwargs):
    config = PracticeConfig(passages=[PASSAGE], **config_kwargs)
    engine = ScriptedEngine(steps or [], autoplay=autoplay)
    return PracticeSession(engine, config), engine


class TestListening:
    """Tests for the transcript path."""

    def test_start_configures_engine(self):
        """Test that start passes language and streaming flags."""
        session, engine = make_session(recognition=RecognitionSettings(language="en-GB"))

        assert session.start_listening()
        assert session.listening
        assert session.status == STATUS_LISTENING
        assert engine.language == "en-GB"
        assert engine.continuous is True
        assert engine.interim_results is True

    def test_start_twice_is_rejected(self):
        """Test that a second start while listening does nothing."""
        session, engine = make_session()
        session.start_listening()

        assert not session.start_listening()
        assert engine.start_count == 1

    def test_live_scoring(self):
        """Test that each transcript updates states and score live."""
        session, _ = make_session()
        session.start_listening()

        session.handle_transcript("reading aloud help build confidents")

        assert session.score == 80
        assert session.feedback == ""
        assert session.listening
        assert session.summary.missed_words == ["confidence."]

    def test_scripted_events_are_cumulative(self):
        """Test result notifications flowing through the engine."""
        session, engine = make_session(
            [
                ScriptStep.result("reading aloud"),
                ScriptStep.result("reading aloud", " helps build"),
            ],
            autoplay=False,
        )
        session.start_listening()

        engine.advance()
        assert session.summary.attempted == 2
        engine.advance()
        assert session.summary.attempted == 4
        assert session.transcript == "reading aloud helps build"

    def test_shrinking_transcript(self):
        """Test that a shorter transcript un-commits words."""
        session, _ = make_session()
        session.start_listening()
        session.handle_transcript("reading aloud helps")
        session.handle_transcript("reading aloud")

        assert not session.word_states[4].attempted
        assert session.summary.next_word_index == 4

    def test_ignored_when_not_listening(self):
        """Test that transcripts outside a listening session are dropped."""
        session, _ = make_session()
        session.handle_transcript("reading aloud")

        assert session.summary.attempted == 0
        assert session.score is None

    def test_variant_table_from_config(self):
        """Test that matching settings reach the aligner."""
        config = PracticeConfig(
            passages=["The cat sat."],
            matching=MatchingSettings(use_variant_table=True),
        )
        session = PracticeSession(ScriptedEngine(), config)
        session.start_listening()
        session.handle_transcript("da cat sat")

        assert session.score == 100

    def test_timing_gate(self):
        """Test that words arriving too fast are ignored."""
        clock = FakeClock()
        config = PracticeConfig(
            passages=[PASSAGE],
            recognition=RecognitionSettings(min_word_interval_ms=300),
        )
        session = PracticeSession(ScriptedEngine(), config, clock=clock)
        session.start_listening()

        session.handle_transcript("reading aloud")
        assert session.summary.attempted == 1

        clock.now = 1.0
        session.handle_transcript("reading aloud helps")
        assert session.summary.attempted == 2


class TestStopping:
    """Tests for stop, engine end and engine errors."""

    def test_stop_finalizes_score(self):
        """Test that stopping attaches the feedback tier."""
        session, engine = make_session()
        session.start_listening()
        session.handle_transcript("reading aloud help build confidents")
        session.stop_listening()

        assert not session.listening
        assert not engine.running
        assert session.status == STATUS_STOPPED
        assert session.score == 80
        assert session.feedback == FEEDBACK_HIGH

    def test_stop_is_idempotent(self):
        """Test that stopping twice leaves the same result."""
        session, _ = make_session()
        session.start_listening()
        session.handle_transcript("reading aloud helps build confidence")
        session.stop_listening()
        states = list(session.word_states)
        session.stop_listening()

        assert session.word_states == states
        assert session.score == 100
        assert session.feedback == FEEDBACK_PERFECT

    def test_engine_end_does_not_finalize(self):
        """Test that an engine-initiated end only stops listening."""
        session, _ = make_session([ScriptStep.result("reading"), ScriptStep.end()])
        session.start_listening()

        assert not session.listening
        assert session.status == STATUS_STOPPED
        assert session.score == 100
        assert session.feedback == ""

    def test_network_error(self):
        """Test the expanded message for network errors."""
        session, engine = make_session(
            [
                ScriptStep.result("reading aloud"),
                ScriptStep.error("network"),
                ScriptStep.result("reading aloud helps"),
            ]
        )
        session.start_listening()

        assert not session.listening
        assert not engine.running
        assert session.feedback == NETWORK_ERROR_MESSAGE
        assert session.summary.attempted == 2
        assert engine.remaining == 1

    def test_other_error_codes(self):
        """Test that other codes are shown verbatim."""
        session, _ = make_session()
        session.start_listening()
        session.handle_error(RecognitionError(code="no-speech"))

        assert session.feedback == "Error: no-speech"
        assert session.feedback == EngineError("no-speech").message
        assert not session.listening

    def test_error_does_not_finalize(self):
        """Test that the score stays live after an error."""
        session, _ = make_session()
        session.start_listening()
        session.handle_transcript("reading aloud help build confidents")
        session.handle_error("audio-capture")

        assert session.score == 80
        assert session.feedback == "Error: audio-capture"


class TestCapability:
    """Tests for a missing recognition engine."""

    def test_unavailable_engine(self):
        """Test that listening is disabled with a static message."""
        session = PracticeSession(UnavailableEngine(), PracticeConfig(passages=[PASSAGE]))

        assert not session.available
        assert session.status == CAPABILITY_ABSENT_MESSAGE
        assert not session.start_listening()
        assert not session.listening
        assert session.feedback == CAPABILITY_ABSENT_MESSAGE


class TestManualCorrection:
    """Tests for the edit path."""

    def _wrong_session(self):
        session, _ = make_session()
        session.start_listening()
        session.handle_transcript("reading aloud help build confidents")
        session.stop_listening()
        return session

    def test_edit_wrong_word(self):
        """Test that a matching edit raises the score."""
        session = self._wrong_session()

        assert session.begin_edit(8)
        assert session.editing_index == 8
        assert session.submit_edit("Confidence!")

        assert session.editing_index is None
        assert session.word_states[8].correct
        assert session.word_states[8].word == "confidence."
        assert session.score == 100
        assert session.feedback == FEEDBACK_PERFECT

    def test_edit_not_wrong_word_is_noop(self):
        """Test that only wrong words can be edited."""
        session = self._wrong_session()
        states = list(session.word_states)

        assert not session.begin_edit(0)
        assert session.editing_index is None
        assert not session.submit_edit("anything")
        assert not session.edit_word(2, "aloud")
        assert session.word_states == states
        assert session.score == 80

    def test_failed_edit_stays_wrong(self):
        """Test a non-matching edit."""
        session = self._wrong_session()

        assert not session.edit_word(8, "confident")
        assert session.word_states[8].wrong
        assert session.score == 80

    def test_edit_index_out_of_range(self):
        """Test that a bad index raises ValidationError."""
        session = self._wrong_session()
        with pytest.raises(ValidationError):
            session.begin_edit(100)

    def test_cancel_edit(self):
        """Test leaving edit mode."""
        session = self._wrong_session()
        session.begin_edit(8)
        session.cancel_edit()

        assert session.editing_index is None
        assert not session.submit_edit("confidence")


class TestReset:
    """Tests for reset and passage selection."""

    def test_reset_never_repeats_passage(self):
        """Test reselection with several passages."""
        config = PracticeConfig(passages=["one", "two", "three", "four"])
        session = PracticeSession(ScriptedEngine(), config, rng=random.Random(7))

        for _ in range(50):
            previous = session.library.active_index
            session.reset()
            assert session.library.active_index != previous

    def test_reset_single_passage(self):
        """Test that a single passage is kept."""
        session, _ = make_session()
        session.reset()
        assert session.passage == PASSAGE

    def test_reset_clears_state_and_stops(self):
        """Test that reset rebuilds states and stops listening."""
        session, engine = make_session()
        session.start_listening()
        session.handle_transcript("reading aloud")
        session.reset()

        assert not session.listening
        assert not engine.running
        assert session.score is None
        assert session.feedback == ""
        assert session.summary.attempted == 0
        assert len(session.word_states) == len(session.reference)

    def test_select_passage(self):
        """Test choosing a passage by index."""
        library = PassageLibrary(["one two", "three four five"])
        session = PracticeSession(ScriptedEngine(), library=library)
        session.select_passage(1)

        assert session.passage == "three four five"
        assert session.summary.total_words == 3


class TestListeners:
    """Tests for change notifications."""

    def test_listener_called_on_changes(self):
        """Test that subscribers see every state change."""
        session, _ = make_session()
        seen = []
        session.subscribe(lambda s: seen.append(s.score))

        session.start_listening()
        session.handle_transcript("reading")
        session.stop_listening()

        assert seen == [None, 100, 100]
