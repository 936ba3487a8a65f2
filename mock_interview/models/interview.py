"""Interview session models for the Mock Interview system."""

import math
from typing import List, Optional
from uuid import uuid4

from pydantic import Field

from .base import BaseModel, TimestampedModel
from .enums import DifficultyLevel, SessionStatus

# Feedback recorded on an attempt whose answer could not be scored
SCORING_FAILED_FEEDBACK = "(scoring failed)"


def round_score(value: float) -> float:
    """Round a score to one decimal place, halves rounded up."""
    return math.floor(value * 10 + 0.5) / 10


def new_session_id() -> str:
    """Generate a session identifier."""
    return f"s_{uuid4().hex[:12]}"


class Question(BaseModel):
    """Immutable interview question template from the catalog."""

    question_id: str = Field(..., alias="id", description="Unique question identifier")
    text: str = Field(..., description="Question prompt text")
    difficulty: DifficultyLevel = Field(..., description="Question difficulty level")
    time_limit: int = Field(..., alias="timeLimit", gt=0, description="Time limit in seconds")

    class Config:
        frozen = True


class ScoreResult(BaseModel):
    """Score and feedback returned by the scoring service."""

    score: float = Field(..., description="Score on the 0-10 scale (not clamped)")
    feedback: str = Field(default="", description="Short feedback sentence")


class QuestionAttempt(BaseModel):
    """Mutable record of one question's answer, score and remaining time."""

    question_id: str = Field(..., alias="id", description="Catalog question identifier")
    text: str = Field(..., description="Question prompt text")
    difficulty: DifficultyLevel = Field(..., description="Question difficulty level")
    time_limit: int = Field(..., alias="timeLimit", description="Time limit in seconds")
    answer: str = Field(default="", description="Candidate's answer, or the draft typed so far")
    score: Optional[float] = Field(default=None, description="Score, None until submitted")
    feedback: str = Field(default="", description="Scoring feedback")
    time_remaining: int = Field(..., alias="timeRemaining", ge=0, description="Seconds left on the countdown")

    @classmethod
    def from_question(cls, question: Question) -> "QuestionAttempt":
        """Create a fresh attempt for a catalog question."""
        return cls(
            question_id=question.question_id,
            text=question.text,
            difficulty=question.difficulty,
            time_limit=question.time_limit,
            time_remaining=question.time_limit,
        )


class ContactInfo(BaseModel):
    """Best-effort contact details extracted from a resume."""

    name: Optional[str] = Field(None, description="Candidate's full name")
    email: Optional[str] = Field(None, description="Candidate's email address")
    phone: Optional[str] = Field(None, description="Candidate's phone number")


class InterviewSession(TimestampedModel):
    """One candidate's end-to-end interview record."""

    id: str = Field(default_factory=new_session_id, description="Unique session identifier")
    name: str = Field(default="", description="Candidate name")
    email: str = Field(default="", description="Candidate email")
    phone: str = Field(default="", description="Candidate phone")
    resume_text: str = Field(default="", alias="resumeText", description="Raw resume text")
    questions: List[QuestionAttempt] = Field(default_factory=list, description="Question attempts in catalog order")
    current_question_index: int = Field(default=0, alias="currentQuestionIndex", ge=0, description="Index of the current attempt")
    status: SessionStatus = Field(default=SessionStatus.CREATED, description="Session status")
    final_score: Optional[float] = Field(default=None, alias="finalScore", description="Mean score, set once finished")

    @classmethod
    def from_contact(cls, contact: ContactInfo, resume_text: str) -> "InterviewSession":
        """Create a new session from extracted contact details."""
        return cls(
            name=contact.name or "",
            email=contact.email or "",
            phone=contact.phone or "",
            resume_text=resume_text,
        )

    @property
    def is_finished(self) -> bool:
        """Check if the session has been finalized."""
        return self.status == SessionStatus.FINISHED

    def current_attempt(self) -> Optional[QuestionAttempt]:
        """Get the attempt at the current index, if any."""
        if self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    def compute_final_score(self) -> float:
        """Mean of all attempt scores, unscored attempts counting as 0."""
        if not self.questions:
            return 0.0
        total = sum(attempt.score or 0 for attempt in self.questions)
        return round_score(total / len(self.questions))

    def completion_percentage(self) -> float:
        """Calculate session completion percentage."""
        if not self.questions:
            return 0.0
        return (self.current_question_index / len(self.questions)) * 100

    def ranking_score(self) -> float:
        """Score used to sort the interviewer dashboard."""
        return self.final_score or 0.0
