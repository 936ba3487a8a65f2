"""Scoring proxy: FastAPI app in front of the OpenAI chat completions API."""

from .app import create_app
from .reply_parser import (
    ParseFailure,
    QuestionReply,
    ScoreReply,
    fallback_question_reply,
    fallback_score_reply,
    parse_question_reply,
    parse_score_reply,
)

__all__ = [
    "create_app",
    "ParseFailure",
    "QuestionReply",
    "ScoreReply",
    "fallback_question_reply",
    "fallback_score_reply",
    "parse_question_reply",
    "parse_score_reply",
]
