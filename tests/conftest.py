"""Shared fixtures for the Mock Interview test suite."""

import asyncio
from typing import List, Optional, Tuple

import pytest

from mock_interview.core.session_machine import SessionStateMachine
from mock_interview.models.enums import DifficultyLevel
from mock_interview.models.interview import ContactInfo, InterviewSession, Question, ScoreResult


class FakeScoringService:
    """Scoring service double that records calls and returns queued results."""

    def __init__(self, results: Optional[List[ScoreResult]] = None, error: Optional[Exception] = None,
                 delay: float = 0.0):
        self.results = list(results or [])
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []
        self.gate: Optional[asyncio.Event] = None

    async def score_answer(self, question_text: str, answer_text: str) -> ScoreResult:
        self.calls.append((question_text, answer_text))
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.results:
            return self.results.pop(0)
        return ScoreResult(score=5, feedback="ok")


class ManualTimer:
    """Countdown double; tests drive ticks by dispatching them directly."""

    def __init__(self, on_tick):
        self.on_tick = on_tick
        self.starts = 0
        self.stops = 0
        self.running = False

    @property
    def is_running(self) -> bool:
        return self.running

    def start(self) -> None:
        self.starts += 1
        self.running = True

    def stop(self) -> None:
        self.stops += 1
        self.running = False


@pytest.fixture
def two_question_catalog() -> List[Question]:
    return [
        Question(question_id="q1", text="Tell me about a recent project you built.",
                 difficulty=DifficultyLevel.EASY, time_limit=20),
        Question(question_id="q2", text="Explain how you manage state in a React app.",
                 difficulty=DifficultyLevel.EASY, time_limit=60),
    ]


@pytest.fixture
def session() -> InterviewSession:
    return InterviewSession.from_contact(
        ContactInfo(name="Jane Doe", email="jane@example.com", phone="555-123-4567"),
        "Jane Doe\njane@example.com",
    )


@pytest.fixture
def scoring() -> FakeScoringService:
    return FakeScoringService()


@pytest.fixture
def commits() -> List[InterviewSession]:
    return []


@pytest.fixture
def make_machine(session, scoring, two_question_catalog, commits):
    """Build a state machine over the shared session with a manual timer."""

    async def on_commit(committed: InterviewSession) -> None:
        commits.append(committed)

    def factory(**overrides) -> SessionStateMachine:
        options = {
            "scoring_service": scoring,
            "catalog": two_question_catalog,
            "on_commit": on_commit,
            "timer_factory": ManualTimer,
        }
        options.update(overrides)
        return SessionStateMachine(session, **options)

    return factory
