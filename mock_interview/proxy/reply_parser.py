"""Parsing of language model replies into typed score and question payloads.

Parsing happens in two steps. The strict step turns the model text into a
``ScoreReply`` or ``QuestionReply`` or returns a ``ParseFailure`` carrying
the raw text. The fallback step turns a failure into a usable reply, so
malformed model output never becomes an error.
"""

import json
import re
from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, Field, ValidationError

FEEDBACK_FALLBACK_LENGTH = 200

_FIRST_INTEGER = re.compile(r"\d+")
_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class ScoreReply(BaseModel):
    """Score and one-sentence feedback for an answer."""
    score: float = Field(..., description="Score on the 0-10 scale")
    feedback: str = Field(default="", description="One-sentence feedback")


class QuestionReply(BaseModel):
    """A generated interview question."""
    question: str = Field(..., description="Question text")


@dataclass
class ParseFailure:
    """Model text that could not be read as the expected JSON shape."""
    raw_text: str
    reason: str


def _load_json(text: str):
    stripped = text.strip()
    fenced = _CODE_FENCE.match(stripped)
    if fenced:
        stripped = fenced.group(1)
    return json.loads(stripped)


def parse_score_reply(text: str) -> Union[ScoreReply, ParseFailure]:
    """Read model text as ``{"score": ..., "feedback": ...}``."""
    try:
        return ScoreReply.model_validate(_load_json(text))
    except json.JSONDecodeError as e:
        return ParseFailure(raw_text=text, reason=f"invalid JSON: {e.msg}")
    except ValidationError as e:
        return ParseFailure(raw_text=text, reason=f"unexpected shape: {e.error_count()} errors")


def fallback_score_reply(failure: ParseFailure) -> ScoreReply:
    """Salvage a score from free text.

    The score is the first integer in the text (0 when there is none) and
    the feedback is the text on one line, cut to 200 characters.
    """
    match = _FIRST_INTEGER.search(failure.raw_text)
    score = int(match.group(0)) if match else 0
    feedback = failure.raw_text.replace("\n", " ")[:FEEDBACK_FALLBACK_LENGTH]
    return ScoreReply(score=score, feedback=feedback)


def parse_question_reply(text: str) -> Union[QuestionReply, ParseFailure]:
    """Read model text as ``{"question": ...}``."""
    try:
        return QuestionReply.model_validate(_load_json(text))
    except json.JSONDecodeError as e:
        return ParseFailure(raw_text=text, reason=f"invalid JSON: {e.msg}")
    except ValidationError as e:
        return ParseFailure(raw_text=text, reason=f"unexpected shape: {e.error_count()} errors")


def fallback_question_reply(failure: ParseFailure) -> QuestionReply:
    """Use the raw model text as the question."""
    return QuestionReply(question=failure.raw_text)


def read_score_reply(text: str) -> ScoreReply:
    """Strict parse with fallback for score replies."""
    reply = parse_score_reply(text)
    if isinstance(reply, ParseFailure):
        return fallback_score_reply(reply)
    return reply


def read_question_reply(text: str) -> QuestionReply:
    """Strict parse with fallback for question replies."""
    reply = parse_question_reply(text)
    if isinstance(reply, ParseFailure):
        return fallback_question_reply(reply)
    return reply
