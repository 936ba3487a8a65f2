"""Tests for models and the question catalog."""

from pathlib import Path

import pytest

from mock_interview.models.catalog import DEFAULT_QUESTIONS, load_question_catalog
from mock_interview.models.enums import DifficultyLevel, SessionStatus
from mock_interview.models.interview import InterviewSession, QuestionAttempt, round_score

CATALOG_FILE = Path(__file__).parent.parent / "config" / "question_catalog.yaml"


class TestRoundScore:
    @pytest.mark.parametrize("value,expected", [(5.5, 5.5), (7.6667, 7.7), (0.25, 0.3), (4.0, 4.0), (0, 0)])
    def test_half_up_to_one_decimal(self, value, expected):
        assert round_score(value) == expected


class TestEnums:
    def test_status_values(self):
        assert SessionStatus("in-progress") is SessionStatus.IN_PROGRESS
        assert SessionStatus("IN_PROGRESS") is SessionStatus.IN_PROGRESS

    def test_difficulty_accepts_names(self):
        assert DifficultyLevel("Hard") is DifficultyLevel.HARD


class TestInterviewSession:
    def test_new_session_defaults(self):
        session = InterviewSession(name="Ada")

        assert session.id.startswith("s_")
        assert session.status == SessionStatus.CREATED
        assert session.questions == []
        assert session.current_attempt() is None
        assert session.final_score is None

    def test_attempt_from_question(self):
        attempt = QuestionAttempt.from_question(DEFAULT_QUESTIONS[0])

        assert attempt.time_remaining == attempt.time_limit == 20
        assert attempt.answer == ""
        assert attempt.score is None

    def test_compute_final_score_counts_missing_as_zero(self):
        attempts = [QuestionAttempt.from_question(q) for q in DEFAULT_QUESTIONS[:2]]
        attempts[0].score = 9
        session = InterviewSession(questions=attempts)

        assert session.compute_final_score() == 4.5

    def test_ranking_score(self):
        assert InterviewSession().ranking_score() == 0
        assert InterviewSession(final_score=6.5).ranking_score() == 6.5


class TestCatalog:
    def test_default_catalog(self):
        assert [q.question_id for q in DEFAULT_QUESTIONS] == ["q1", "q2", "q3", "q4", "q5", "q6"]
        assert [q.time_limit for q in DEFAULT_QUESTIONS] == [20, 60, 60, 90, 120, 120]

    def test_shipped_catalog_matches_defaults(self):
        assert load_question_catalog(CATALOG_FILE) == DEFAULT_QUESTIONS

    def test_no_path_uses_defaults(self):
        assert load_question_catalog() == DEFAULT_QUESTIONS

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_question_catalog(tmp_path / "missing.yaml") == DEFAULT_QUESTIONS

    def test_custom_catalog(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "question_catalog:\n"
            "  - id: py1\n"
            "    text: What is a generator?\n"
            "    difficulty: medium\n"
            "    timeLimit: 45\n",
            encoding="utf-8",
        )

        catalog = load_question_catalog(path)

        assert len(catalog) == 1
        assert catalog[0].difficulty == DifficultyLevel.MEDIUM
        assert catalog[0].time_limit == 45

    @pytest.mark.parametrize("content", [
        "question_catalog:\n  - id: bad\n    text: x\n    difficulty: easy\n    timeLimit: 0\n",
        "question_catalog: [unclosed\n",
        "",
    ])
    def test_invalid_catalog_uses_defaults(self, tmp_path, content):
        path = tmp_path / "catalog.yaml"
        path.write_text(content, encoding="utf-8")

        assert load_question_catalog(path) == DEFAULT_QUESTIONS
