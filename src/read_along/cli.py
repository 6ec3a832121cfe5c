"""Command-line interface for read-along.

Uses Typer for a modern, type-hinted CLI experience.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

# Load environment variables from a local .env file (READ_ALONG_CONFIG etc.)
load_dotenv()

from read_along import __version__
from read_along.config import PracticeConfig, resolve_config
from read_along.errors import ReadAlongError, format_error_for_display
from read_along.logging import LogConfig, LogLevel, configure_logging
from read_along.models.passage import PassageLibrary
from read_along.models.word_state import WordState, initial_word_states
from read_along.recognition.console import ConsoleEngine
from read_along.recognition.scripted import ScriptedEngine
from read_along.scoring.aligner import align_transcript
from read_along.scoring.score import ScoreSummary, score_feedback, summarize
from read_along.session import PracticeSession
from read_along.text.tokenizer import build_reference

# Create the main Typer app
app = typer.Typer(
    name="read-along",
    help="Score reading-aloud practice against a reference passage.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

# Options shared by every command, filled in by the app callback
_options: dict[str, Path | None] = {"config": None}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"read-along version {__version__}")
        raise typer.Exit()


def fail(error: Exception) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(format_error_for_display(error))}")
    raise typer.Exit(1)


def load_practice_config() -> PracticeConfig:
    """Resolve the config from --config, the environment or defaults."""
    try:
        return resolve_config(_options["config"])
    except ReadAlongError as e:
        fail(e)


def render_passage(states: list[WordState], next_index: int | None = None) -> Text:
    """Render word states as colored text.

    Correct words are green, wrong words red, and the next word to read
    is underlined.
    """
    text = Text()
    for index, state in enumerate(states):
        if state.correct:
            style = "bold green"
        elif state.wrong:
            style = "bold red"
        elif index == next_index:
            style = "underline"
        else:
            style = ""
        text.append(state.word, style=style)
    return text


def print_results(states: list[WordState], summary: ScoreSummary, feedback: str) -> None:
    """Print the passage, score and words to practice."""
    console.print(Panel(render_passage(states, summary.next_word_index), title="Passage"))

    table = Table(show_header=False, box=None)
    table.add_column("Label", style="bold")
    table.add_column("Value")
    table.add_row("Score", f"{summary.score}%")
    table.add_row("Words read", f"{summary.words_read}/{summary.total_words}")
    if feedback:
        table.add_row("Feedback", feedback)
    console.print(table)

    if summary.missed_words:
        console.print(f"[bold]Words to practice:[/bold] {', '.join(summary.missed_words)}")


@app.callback()
def main(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a JSON config file"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv)"),
    ] = 0,
    log_file: Annotated[
        Optional[Path],
        typer.Option("--log-file", help="Also write debug logs to this file"),
    ] = None,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Read Along - reading-aloud practice.

    Read a passage aloud; every word is marked [green]correct[/green],
    [red]wrong[/red] or not yet attempted, and an accuracy score is kept.
    """
    _options["config"] = config
    level = LogLevel(min(LogLevel.NORMAL + verbose, LogLevel.DEBUG))
    configure_logging(LogConfig(level=level, log_file=log_file))


@app.command("passages")
def list_passages() -> None:
    """List the configured practice passages."""
    config = load_practice_config()

    table = Table(title="Passages")
    table.add_column("#", style="dim", width=3)
    table.add_column("Words", style="cyan", justify="right")
    table.add_column("Text", style="white")

    for index, passage in enumerate(config.passages):
        words = sum(1 for t in build_reference(passage) if not t.is_blank)
        marker = " *" if index == config.initial_passage else ""
        table.add_row(f"{index}{marker}", str(words), passage)

    console.print(table)


@app.command()
def score(
    transcript: Annotated[str, typer.Argument(help="What the reader said")],
    reference: Annotated[
        Optional[str],
        typer.Option("--reference", "-r", help="Reference text (defaults to a configured passage)"),
    ] = None,
    passage: Annotated[
        Optional[int],
        typer.Option("--passage", "-p", help="Index of the configured passage to score against"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the summary as JSON"),
    ] = False,
) -> None:
    """Score a single transcript against a passage."""
    config = load_practice_config()

    if reference is None:
        try:
            library = PassageLibrary(config.passages, active=config.initial_passage)
            if passage is not None:
                library.select(passage)
        except ReadAlongError as e:
            fail(e)
        reference = library.active

    tokens = build_reference(reference)
    states = align_transcript(
        initial_word_states(tokens),
        tokens,
        transcript,
        max_distance=config.matching.max_edit_distance,
        variants=config.matching.active_variants(),
    )
    summary = summarize(states)
    feedback = score_feedback(summary.score)

    if as_json:
        data = summary.to_dict()
        data["feedback"] = feedback
        typer.echo(json.dumps(data, indent=2))
        return

    print_results(states, summary, feedback)


@app.command()
def replay(
    script: Annotated[Path, typer.Argument(help="JSON replay script of recognition events")],
    passage: Annotated[
        Optional[int],
        typer.Option("--passage", "-p", help="Index of the configured passage to read"),
    ] = None,
) -> None:
    """Replay scripted recognition events through a practice session."""
    config = load_practice_config()

    try:
        engine = ScriptedEngine.from_file(script)
        session = PracticeSession(engine, config)
        if passage is not None:
            session.select_passage(passage)
    except ReadAlongError as e:
        fail(e)

    session.start_listening()
    if session.listening or not session.feedback:
        # Script finished without an engine error: finalize like a manual stop
        session.stop_listening()
    else:
        console.print(f"[yellow]{session.feedback}[/yellow]")

    print_results(session.word_states, session.summary, session.feedback)


@app.command()
def practice(
    passage: Annotated[
        Optional[int],
        typer.Option("--passage", "-p", help="Index of the configured passage to read"),
    ] = None,
    edit: Annotated[
        bool,
        typer.Option("--edit/--no-edit", help="Offer to retype wrong words afterwards"),
    ] = True,
) -> None:
    """Practice interactively by typing what you read, line by line.

    Each line extends the transcript. Finish with an empty line.
    """
    config = load_practice_config()

    try:
        session = PracticeSession(ConsoleEngine(prompt="> "), config)
        if passage is not None:
            session.select_passage(passage)
    except ReadAlongError as e:
        fail(e)

    console.print(Panel(session.passage, title="Read this aloud"))
    console.print("[dim]Type what you read; an empty line stops listening.[/dim]")

    def show_progress(current: PracticeSession) -> None:
        if current.listening and current.transcript:
            console.print(render_passage(current.word_states, current.summary.next_word_index))
            console.print(f"[dim]Score so far: {current.score}%[/dim]")

    session.subscribe(show_progress)
    if not session.start_listening():
        console.print(f"[red]{session.feedback}[/red]")
        raise typer.Exit(1)
    session.stop_listening()

    if edit:
        for index, state in enumerate(session.word_states):
            if not state.wrong:
                continue
            typed = typer.prompt(
                f"Retype '{state.word.strip()}' (empty to skip)",
                default="",
                show_default=False,
            )
            if typed.strip():
                session.edit_word(index, typed)

    print_results(session.word_states, session.summary, session.feedback)


if __name__ == "__main__":
    app()
