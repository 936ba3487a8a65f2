"""CLI interface for the Mock Interview tool."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .core.session_machine import SessionStateMachine
from .models.catalog import load_question_catalog
from .models.interview import InterviewSession, QuestionAttempt
from .parsers.resume_parser import ResumeParser
from .proxy.app import create_app
from .services.configuration_manager import ConfigurationManager
from .services.scoring_client import ScoringClient
from .services.session_manager import SessionManager
from .services.storage_manager import StorageManager
from .utils.exceptions import ExtractionError, MockInterviewError, ScoringError, SessionError
from .utils.logging import get_logger, setup_logging

console = Console()
logger = get_logger("cli")

# Remaining seconds at which a countdown notice is printed
COUNTDOWN_NOTICES = (30, 10, 5)
POLL_INTERVAL = 0.2


@click.group()
@click.version_option(version="0.1.0")
@click.option("--config", "-c", type=click.Path(exists=True, file_okay=False), help="Configuration directory")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool):
    """Mock Interview - timed interview practice scored by a language model."""
    ctx.ensure_object(dict)

    try:
        config_manager = ConfigurationManager(config or "config")
        config_manager.initialize()
    except MockInterviewError as e:
        console.print(f"[red]Failed to load configuration: {e}[/red]")
        sys.exit(1)

    logging_config = config_manager.get_logging_config()
    logging_config["level"] = "DEBUG" if verbose else "ERROR"
    setup_logging(**logging_config)

    ctx.obj["config_manager"] = config_manager
    ctx.obj["config"] = config_manager.get_config()
    logger.info("CLI initialized successfully")


def _build_session_manager(ctx: click.Context) -> SessionManager:
    config = ctx.obj["config"]
    return SessionManager(
        StorageManager.from_config(config.storage),
        ScoringClient.from_config(config.scoring),
        catalog=load_question_catalog(ctx.obj["config_manager"].get_catalog_path()),
        tick_interval=config.interview.tick_interval_seconds,
    )


@cli.command()
@click.argument("resume", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def upload(ctx: click.Context, resume: str):
    """Extract contact details from a PDF, DOCX or text resume and create a session."""
    asyncio.run(_upload(ctx, Path(resume)))


async def _upload(ctx: click.Context, resume_path: Path):
    manager = _build_session_manager(ctx)
    await manager.initialize()

    with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"),
                  console=console, transient=True) as progress:
        progress.add_task("Extracting text...", total=None)
        try:
            result = ResumeParser().parse(resume_path.read_bytes(), resume_path.name)
        except ExtractionError as e:
            logger.error(f"Extraction failed for {resume_path}: {e}")
            result = None

    if result is None:
        console.print("[red]Failed to extract text. Try PDF or DOCX.[/red]")
        sys.exit(1)

    session = await manager.create_session(result.contact, result.raw_text)

    contact_content = "\n".join([
        f"[bold]Name:[/bold]  {session.name or '[dim]not found[/dim]'}",
        f"[bold]Email:[/bold] {session.email or '[dim]not found[/dim]'}",
        f"[bold]Phone:[/bold] {session.phone or '[dim]not found[/dim]'}",
    ])
    console.print(Panel(contact_content, title=f"Session {session.id} created", border_style="green"))
    console.print(f"Start the interview with: [bold]mock-interview interview {session.id}[/bold]")


@cli.command()
@click.pass_context
def sessions(ctx: click.Context):
    """List stored sessions, newest first."""
    asyncio.run(_list_sessions(ctx))


async def _list_sessions(ctx: click.Context):
    manager = _build_session_manager(ctx)
    await manager.initialize()

    stored = manager.list_sessions()
    if not stored:
        console.print("[yellow]No sessions yet - upload a resume to start.[/yellow]")
        return

    table = Table(title="Sessions")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Contact")
    table.add_column("Status")
    table.add_column("Progress", justify="right")

    for session in stored:
        progress = f"{session.completion_percentage():.0f}%" if session.questions else "-"
        table.add_row(
            session.id,
            session.name or "Unknown",
            " ".join(part for part in (session.email, session.phone) if part),
            session.status.value,
            progress,
        )
    console.print(table)


@cli.command()
@click.argument("session_id")
@click.pass_context
def interview(ctx: click.Context, session_id: str):
    """Start or resume the timed interview for a session."""
    asyncio.run(_run_interview(ctx, session_id))


async def _run_interview(ctx: click.Context, session_id: str):
    manager = _build_session_manager(ctx)
    await manager.initialize()

    try:
        machine = await manager.open_session(session_id)
    except SessionError as e:
        console.print(f"[red]{e.message}[/red]")
        sys.exit(1)

    try:
        while not machine.session.is_finished:
            index = machine.session.current_question_index
            _show_question(machine.session, machine.current_attempt)

            answer_task = asyncio.create_task(asyncio.to_thread(console.input, "[bold yellow]Your answer:[/bold yellow] "))
            timed_out = await _wait_for_answer(machine, index, answer_task)

            if timed_out:
                console.print("[yellow]Time's up! Your answer was submitted automatically. Press Enter to continue.[/yellow]")
                await _acknowledge_timeout(machine, answer_task)
            else:
                with console.status("Scoring your answer..."):
                    await machine.submit(answer_task.result().strip())

            _show_evaluation(machine.session.questions[index])

        _show_final(machine.session)
    finally:
        await manager.close_session()


async def _wait_for_answer(machine: SessionStateMachine, index: int, answer_task: asyncio.Task) -> bool:
    """Wait for typed input or the countdown, whichever ends first.

    Returns:
        True if the question was submitted by the countdown.
    """
    notified = set()
    while not answer_task.done():
        await asyncio.wait({answer_task}, timeout=POLL_INTERVAL)
        if machine.is_submitting or machine.session.current_question_index != index:
            return True

        remaining = machine.remaining_time
        for notice in COUNTDOWN_NOTICES:
            if remaining is not None and remaining <= notice and notice not in notified:
                notified.add(notice)
                console.print(f"[dim]{remaining} seconds left[/dim]")
                break
    return machine.is_submitting or machine.session.current_question_index != index


async def _acknowledge_timeout(machine: SessionStateMachine, answer_task: asyncio.Task):
    """Hold the next countdown until the candidate has seen the timeout.

    The machine stays suspended while the auto-submitted answer is scored
    and until Enter is pressed, then resumes on the next question.
    """
    await machine.suspend()
    await answer_task
    while machine.is_submitting:
        await asyncio.sleep(POLL_INTERVAL)
    if not machine.session.is_finished:
        await machine.activate()


def _show_question(session: InterviewSession, attempt: QuestionAttempt):
    position = session.current_question_index + 1
    question_panel = Panel(
        f"[bold]Question {position}:[/bold]\n\n{attempt.text}",
        title=(f"Difficulty: {attempt.difficulty.value} | Time left: {attempt.time_remaining}s | "
               f"Progress: {position}/{len(session.questions)}"),
        border_style="green",
    )
    console.print(question_panel)


def _show_evaluation(attempt: QuestionAttempt):
    evaluation_panel = Panel(
        f"[bold]Feedback:[/bold]\n\n{attempt.feedback or '-'}",
        title=f"Score: {attempt.score}",
        border_style="cyan",
    )
    console.print(evaluation_panel)


def _show_final(session: InterviewSession):
    lines = [f"{i + 1}. {attempt.text}  [bold]{attempt.score}[/bold]" for i, attempt in enumerate(session.questions)]
    report_panel = Panel(
        "\n".join(lines) + f"\n\n[bold]Final score: {session.final_score}[/bold]",
        title="Interview complete",
        border_style="blue",
    )
    console.print(report_panel)


@cli.command()
@click.option("--details", "-d", "details_id", help="Print the full stored record of one session")
@click.pass_context
def dashboard(ctx: click.Context, details_id: Optional[str]):
    """Interviewer view: sessions ranked by final score."""
    asyncio.run(_dashboard(ctx, details_id))


async def _dashboard(ctx: click.Context, details_id: Optional[str]):
    manager = _build_session_manager(ctx)
    await manager.initialize()

    if details_id:
        session = manager.get(details_id)
        if session is None:
            console.print(f"[red]Session not found: {details_id}[/red]")
            sys.exit(1)
        console.print_json(session.model_dump_json(by_alias=True))
        return

    ranked = manager.ranked_sessions()
    if not ranked:
        console.print("[yellow]No candidates yet.[/yellow]")
        return

    table = Table(title="Interviewer Dashboard")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Score", justify="right")
    table.add_column("ID", style="cyan")

    for rank, session in enumerate(ranked, start=1):
        score = str(session.final_score) if session.final_score is not None else "[dim]Not finished[/dim]"
        table.add_row(str(rank), session.name or "Unknown", session.email, score, session.id)
    console.print(table)


@cli.command()
@click.argument("session_id")
@click.pass_context
def delete(ctx: click.Context, session_id: str):
    """Delete a stored session."""
    asyncio.run(_delete(ctx, session_id))


async def _delete(ctx: click.Context, session_id: str):
    manager = _build_session_manager(ctx)
    await manager.initialize()

    if await manager.delete_session(session_id):
        console.print(f"[green]Deleted session {session_id}[/green]")
    else:
        console.print(f"[red]Session not found: {session_id}[/red]")
        sys.exit(1)


@cli.command()
@click.option("--host", help="Bind address (defaults to proxy.host)")
@click.option("--port", type=int, help="Bind port (defaults to proxy.port)")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]):
    """Run the scoring proxy."""

    config_manager = ctx.obj["config_manager"]
    config = ctx.obj["config"]
    setup_logging(**config_manager.get_logging_config())

    app = create_app(config)
    uvicorn.run(app, host=host or config.proxy.host, port=port or config.proxy.port, log_config=None)


@cli.command()
@click.option("--topic", "-t", default="general", help="Question topic")
@click.option("--difficulty", "-d", type=click.Choice(["easy", "medium", "hard"]), default="medium",
              help="Question difficulty")
@click.pass_context
def generate(ctx: click.Context, topic: str, difficulty: str):
    """Ask the proxy for a generated interview question."""
    client = ScoringClient.from_config(ctx.obj["config"].scoring)
    try:
        with console.status("Generating question..."):
            question = asyncio.run(client.generate_question(topic, difficulty))
    except ScoringError as e:
        console.print(f"[red]Failed to generate question: {e.message}[/red]")
        sys.exit(1)

    console.print(Panel(question, title=f"Topic: {topic} | Difficulty: {difficulty}", border_style="green"))


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(0)
    except MockInterviewError as e:
        console.print(f"[red]{e}[/red]")
        logger.error(f"CLI error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
