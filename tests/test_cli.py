"""Tests for the read-along CLI."""

import json

import pytest
from typer.testing import CliRunner

from read_along import __version__
from read_along.cli import app
from read_along.config import PracticeConfig, save_config
from read_along.scoring.score import FEEDBACK_HIGH

runner = CliRunner()

PASSAGE = "Reading aloud helps build confidence."


@pytest.fixture
def config_path(tmp_path):
    return save_config(PracticeConfig(passages=[PASSAGE]), tmp_path / "config.json")


def write_script(path, steps):
    path.write_text(json.dumps({"steps": steps}), encoding="utf-8")
    return path


class TestScoreCommand:
    """Tests for the score command."""

    def test_json_output(self):
        """Test scoring a transcript against an explicit reference."""
        result = runner.invoke(
            app,
            ["score", "reading aloud help build confidents", "--reference", PASSAGE, "--json"],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["score"] == 80
        assert data["missed_words"] == ["confidence."]
        assert data["feedback"] == FEEDBACK_HIGH

    def test_table_output(self):
        """Test the human-readable summary."""
        result = runner.invoke(
            app, ["score", "reading aloud help build confidents", "--reference", PASSAGE]
        )

        assert result.exit_code == 0
        assert "80%" in result.output
        assert "4/5" in result.output
        assert "Words to practice" in result.output

    def test_configured_passage(self, config_path):
        """Test scoring against a passage from the config file."""
        result = runner.invoke(
            app,
            ["--config", str(config_path), "score", "reading aloud helps build confidence", "--json"],
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["score"] == 100

    def test_bad_passage_index(self, config_path):
        """Test an out-of-range passage index."""
        result = runner.invoke(
            app, ["--config", str(config_path), "score", "reading", "--passage", "5"]
        )

        assert result.exit_code == 1
        assert "out of range" in result.output


class TestPassagesCommand:
    """Tests for the passages command."""

    def test_lists_default_passages(self, monkeypatch):
        """Test listing the built-in passages."""
        monkeypatch.delenv("READ_ALONG_CONFIG", raising=False)
        result = runner.invoke(app, ["passages"])

        assert result.exit_code == 0
        assert "Passages" in result.output
        assert "Dyslexia" in result.output

    def test_missing_config(self, tmp_path):
        """Test that a missing config file is reported."""
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.json"), "passages"])

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestReplayCommand:
    """Tests for the replay command."""

    def test_replay_script(self, tmp_path, config_path):
        """Test replaying cumulative results to a final score."""
        script = write_script(
            tmp_path / "script.json",
            [
                {"type": "result", "results": ["reading aloud"]},
                {"type": "result", "results": ["reading aloud", " helps build confidence"]},
            ],
        )

        result = runner.invoke(app, ["--config", str(config_path), "replay", str(script)])

        assert result.exit_code == 0
        assert "100%" in result.output
        assert "Excellent" in result.output

    def test_replay_engine_error(self, tmp_path, config_path):
        """Test that an engine error is shown and the score left live."""
        script = write_script(
            tmp_path / "script.json",
            [
                {"type": "result", "results": ["reading aloud"]},
                {"type": "error", "code": "no-speech"},
            ],
        )

        result = runner.invoke(app, ["--config", str(config_path), "replay", str(script)])

        assert result.exit_code == 0
        assert "Error: no-speech" in result.output
        assert "100%" in result.output

    def test_missing_script(self, tmp_path, config_path):
        """Test a missing replay script."""
        result = runner.invoke(
            app, ["--config", str(config_path), "replay", str(tmp_path / "missing.json")]
        )

        assert result.exit_code == 1
        assert "Replay script" in result.output

    @pytest.mark.parametrize(
        "result_entry",
        [
            {"alternatives": ["reading"]},
            {"alternatives": [{}]},
        ],
        ids=["bare-string-alternative", "alternative-without-transcript"],
    )
    def test_malformed_script(self, tmp_path, config_path, result_entry):
        """Test that a malformed result entry exits with an error message."""
        script = write_script(
            tmp_path / "script.json",
            [{"type": "result", "results": [result_entry]}],
        )

        result = runner.invoke(app, ["--config", str(config_path), "replay", str(script)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Malformed replay script" in result.output


class TestPracticeCommand:
    """Tests for the interactive practice command."""

    def test_practice_with_correction(self, config_path):
        """Test typing a reading and then fixing the wrong word."""
        result = runner.invoke(
            app,
            ["--config", str(config_path), "practice"],
            input="reading aloud helps build confidents\n\nconfidence\n",
        )

        assert result.exit_code == 0
        assert "Retype" in result.output
        assert "100%" in result.output

    def test_practice_without_edit(self, config_path):
        """Test that --no-edit skips the correction prompts."""
        result = runner.invoke(
            app,
            ["--config", str(config_path), "practice", "--no-edit"],
            input="reading aloud helps build confidents\n\n",
        )

        assert result.exit_code == 0
        assert "Retype" not in result.output
        assert "80%" in result.output


class TestVersion:
    """Tests for --version."""

    def test_version(self):
        """Test the version flag."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output
