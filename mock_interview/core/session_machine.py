"""Interview session state machine.

A session moves ``created -> in-progress -> finished`` and never back.
Every change goes through ``SessionStateMachine.dispatch``, which accepts
one of four intents:

    Activate          materialize attempts on first use, then resume
    Tick              one second of countdown on the current attempt
    Submit(text)      record, score and advance past the current attempt
    UpdateDraft(text) keep the text typed so far on the current attempt

Submission runs in two locked phases around the scoring call. The first
phase records the answer, marks the attempt as in flight and disarms the
countdown; the second records the score and advances. A timeout and a
manual submit for the same attempt therefore produce exactly one scoring
call: whichever enters first wins, the other sees the in-flight marker or
the advanced index and does nothing.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

from ..models.catalog import DEFAULT_QUESTIONS
from ..models.enums import SessionStatus
from ..models.interview import (
    SCORING_FAILED_FEEDBACK,
    InterviewSession,
    Question,
    QuestionAttempt,
    ScoreResult,
)
from ..utils.exceptions import ScoringError, SessionError
from ..utils.logging import get_logger, set_correlation_id
from .timer import CountdownTimer, TickCallback

CommitCallback = Callable[[InterviewSession], Awaitable[None]]
TimerFactory = Callable[[TickCallback], Any]


@dataclass(frozen=True)
class Activate:
    """Start or resume the session."""


@dataclass(frozen=True)
class Tick:
    """One countdown step."""


@dataclass(frozen=True)
class Submit:
    """Submit an answer for the current attempt."""
    text: str


@dataclass(frozen=True)
class UpdateDraft:
    """Store the answer typed so far."""
    text: str


Intent = Union[Activate, Tick, Submit, UpdateDraft]


@dataclass
class _PendingSubmit:
    index: int
    question_text: str
    answer: str


class SessionStateMachine:
    """Drives one interview session through its questions."""

    def __init__(
        self,
        session: InterviewSession,
        scoring_service: Any,
        catalog: Optional[Sequence[Question]] = None,
        on_commit: Optional[CommitCallback] = None,
        timer_factory: Optional[TimerFactory] = None,
        tick_interval: float = 1.0,
        scoring_timeout: Optional[float] = None,
    ):
        """Initialize the state machine.

        Args:
            session: Session to drive; mutated in place
            scoring_service: Object with ``async score_answer(question_text, answer_text) -> ScoreResult``
            catalog: Ordered questions used on first activation
            on_commit: Awaited with the session after every committed change
            timer_factory: Builds the countdown from a tick callback
            tick_interval: Seconds between ticks for the default timer
            scoring_timeout: Upper bound on one scoring call, in seconds
        """
        self.session = session
        self.scoring_service = scoring_service
        self.catalog: List[Question] = list(catalog) if catalog is not None else list(DEFAULT_QUESTIONS)
        self.on_commit = on_commit
        self.scoring_timeout = scoring_timeout
        self.logger = get_logger("session_machine")

        if timer_factory is None:
            def timer_factory(callback: TickCallback) -> CountdownTimer:
                return CountdownTimer(callback, interval=tick_interval)
        self.timer = timer_factory(self._on_timer_tick)

        self._lock = asyncio.Lock()
        self._submitting = False
        self._suspended = False

    @property
    def is_submitting(self) -> bool:
        """Whether a scoring call for the current attempt is in flight."""
        return self._submitting

    @property
    def current_attempt(self) -> Optional[QuestionAttempt]:
        return self.session.current_attempt()

    @property
    def remaining_time(self) -> Optional[int]:
        attempt = self.session.current_attempt()
        return attempt.time_remaining if attempt else None

    async def dispatch(self, intent: Intent) -> Optional[QuestionAttempt]:
        """Apply one intent to the session.

        Returns:
            For ``Activate``, the current attempt (the resume point). For
            ``Submit`` and a ``Tick`` that timed out, the attempt that was
            just scored. ``None`` otherwise.

        Raises:
            SessionError: On activating a finished session or an unknown intent
        """
        set_correlation_id(self.session.id)

        if isinstance(intent, Activate):
            return await self._activate()
        if isinstance(intent, Tick):
            return await self._tick()
        if isinstance(intent, Submit):
            return await self._submit(intent.text)
        if isinstance(intent, UpdateDraft):
            await self._update_draft(intent.text)
            return None

        raise SessionError(f"Unknown intent: {intent!r}", session_id=self.session.id)

    async def activate(self) -> Optional[QuestionAttempt]:
        return await self.dispatch(Activate())

    async def tick(self) -> Optional[QuestionAttempt]:
        return await self.dispatch(Tick())

    async def submit(self, text: str) -> Optional[QuestionAttempt]:
        return await self.dispatch(Submit(text))

    async def update_draft(self, text: str) -> None:
        await self.dispatch(UpdateDraft(text))

    async def suspend(self) -> None:
        """Stop the countdown, keeping the remaining time for a later resume."""
        async with self._lock:
            self._suspended = True
            self.timer.stop()
            if self.session.status == SessionStatus.IN_PROGRESS:
                self.session.update_timestamp()
                await self._commit()
                self.logger.info(f"Suspended session {self.session.id} at question "
                                 f"{self.session.current_question_index + 1}")

    async def _on_timer_tick(self) -> None:
        await self.dispatch(Tick())

    async def _activate(self) -> Optional[QuestionAttempt]:
        async with self._lock:
            session = self.session

            if session.status == SessionStatus.FINISHED:
                raise SessionError("Session is already finished", session_id=session.id)

            if session.status == SessionStatus.CREATED:
                if not self.catalog:
                    raise SessionError("Question catalog is empty", session_id=session.id)
                session.questions = [QuestionAttempt.from_question(q) for q in self.catalog]
                session.current_question_index = 0
                session.status = SessionStatus.IN_PROGRESS
                session.update_timestamp()
                await self._commit()
                self.logger.info(f"Started session {session.id} with {len(session.questions)} questions")
            else:
                self.logger.info(f"Resuming session {session.id} at question {session.current_question_index + 1}")

            self._suspended = False
            attempt = session.current_attempt()
            if attempt is not None and not self._submitting and not self.timer.is_running:
                self.timer.start()
            return attempt

    async def _tick(self) -> Optional[QuestionAttempt]:
        async with self._lock:
            if self.session.status != SessionStatus.IN_PROGRESS or self._submitting:
                self.logger.debug("Ignoring tick: session not accepting ticks")
                return None

            attempt = self.session.current_attempt()
            if attempt is None:
                return None

            attempt.time_remaining = max(0, attempt.time_remaining - 1)
            if attempt.time_remaining > 0:
                return None

            self.logger.info(f"Time expired on question {attempt.question_id}, submitting current draft")
            pending = self._begin_submit(attempt.answer)

        return await self._finish_submit(pending)

    async def _submit(self, text: str) -> Optional[QuestionAttempt]:
        async with self._lock:
            if self.session.status != SessionStatus.IN_PROGRESS:
                self.logger.warning(f"Ignoring submit: session {self.session.id} is {self.session.status.value}")
                return None
            if self._submitting:
                self.logger.warning("Ignoring submit: a submission for this question is already in flight")
                return None

            pending = self._begin_submit(text)

        return await self._finish_submit(pending)

    async def _update_draft(self, text: str) -> None:
        async with self._lock:
            attempt = self.session.current_attempt()
            if self.session.status != SessionStatus.IN_PROGRESS or self._submitting or attempt is None:
                self.logger.debug("Ignoring draft update: no open question")
                return
            attempt.answer = text
            self.session.update_timestamp()
            await self._commit()

    def _begin_submit(self, text: str) -> _PendingSubmit:
        """Record the answer and disarm the countdown. Caller holds the lock."""
        attempt = self.session.current_attempt()
        attempt.answer = text
        self._submitting = True
        self.timer.stop()
        return _PendingSubmit(
            index=self.session.current_question_index,
            question_text=attempt.text,
            answer=text,
        )

    async def _finish_submit(self, pending: _PendingSubmit) -> QuestionAttempt:
        result = await self._score(pending)

        async with self._lock:
            session = self.session
            attempt = session.questions[pending.index]
            attempt.score = result.score
            attempt.feedback = result.feedback
            session.current_question_index = pending.index + 1
            self._submitting = False

            if session.current_question_index >= len(session.questions):
                session.status = SessionStatus.FINISHED
                session.final_score = session.compute_final_score()
                self.logger.info(f"Session {session.id} finished with final score {session.final_score}")
            elif not self._suspended:
                self.timer.start()

            session.update_timestamp()
            await self._commit()
            return attempt

    async def _score(self, pending: _PendingSubmit) -> ScoreResult:
        """Call the scoring service once; any failure yields the sentinel result."""
        try:
            call = self.scoring_service.score_answer(pending.question_text, pending.answer)
            if self.scoring_timeout is not None:
                result = await asyncio.wait_for(call, timeout=self.scoring_timeout)
            else:
                result = await call
            self.logger.info(f"Question {pending.index + 1} scored {result.score}")
            return result
        except ScoringError as e:
            self.logger.warning(f"Scoring failed for question {pending.index + 1}: {str(e)}")
        except asyncio.TimeoutError:
            self.logger.warning(f"Scoring timed out for question {pending.index + 1} after {self.scoring_timeout}s")
        except Exception as e:
            self.logger.error(f"Unexpected scoring failure for question {pending.index + 1}: {str(e)}")

        return ScoreResult(score=0, feedback=SCORING_FAILED_FEEDBACK)

    async def _commit(self) -> None:
        if self.on_commit is not None:
            await self.on_commit(self.session)
