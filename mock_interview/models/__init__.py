"""Data models for the Mock Interview system."""

from .base import BaseModel, TimestampedModel
from .enums import DifficultyLevel, SessionStatus
from .interview import (
    SCORING_FAILED_FEEDBACK,
    ContactInfo,
    InterviewSession,
    Question,
    QuestionAttempt,
    ScoreResult,
    round_score,
)
from .catalog import DEFAULT_QUESTIONS, load_question_catalog

__all__ = [
    "BaseModel",
    "TimestampedModel",
    "DifficultyLevel",
    "SessionStatus",
    "SCORING_FAILED_FEEDBACK",
    "ContactInfo",
    "InterviewSession",
    "Question",
    "QuestionAttempt",
    "ScoreResult",
    "round_score",
    "DEFAULT_QUESTIONS",
    "load_question_catalog",
]
