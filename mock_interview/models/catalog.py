"""Fixed, ordered catalog of interview questions."""

from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import ValidationError

from .enums import DifficultyLevel
from .interview import Question
from ..utils.logging import get_logger

logger = get_logger("question_catalog")

DEFAULT_QUESTIONS: List[Question] = [
    Question(question_id="q1", text="Tell me about a recent project you built.",
             difficulty=DifficultyLevel.EASY, time_limit=20),
    Question(question_id="q2", text="Explain how you manage state in a React app.",
             difficulty=DifficultyLevel.EASY, time_limit=60),
    Question(question_id="q3", text="Describe REST vs GraphQL.",
             difficulty=DifficultyLevel.MEDIUM, time_limit=60),
    Question(question_id="q4", text="How would you optimise a slow React list?",
             difficulty=DifficultyLevel.MEDIUM, time_limit=90),
    Question(question_id="q5", text="Design an API for a todo app; outline endpoints and data model.",
             difficulty=DifficultyLevel.HARD, time_limit=120),
    Question(question_id="q6", text="How do you ensure your app is secure against XSS and CSRF?",
             difficulty=DifficultyLevel.HARD, time_limit=120),
]


def load_question_catalog(path: Optional[Union[str, Path]] = None) -> List[Question]:
    """Load the question catalog from a YAML file.

    The file holds a ``question_catalog`` list of mappings with ``id``,
    ``text``, ``difficulty`` and ``timeLimit`` keys. A missing, empty or
    invalid file falls back to the built-in catalog.

    Args:
        path: Optional path to the catalog file.

    Returns:
        Ordered list of questions.
    """
    if path is None:
        return list(DEFAULT_QUESTIONS)

    catalog_path = Path(path)
    if not catalog_path.exists():
        logger.warning(f"Question catalog not found at {catalog_path}, using default catalog")
        return list(DEFAULT_QUESTIONS)

    try:
        with open(catalog_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

        entries = config_data.get("question_catalog", [])
        if not entries:
            logger.warning(f"No questions found in {catalog_path}, using default catalog")
            return list(DEFAULT_QUESTIONS)

        questions = [Question.model_validate(entry) for entry in entries]
        logger.info(f"Loaded {len(questions)} questions from {catalog_path}")
        return questions

    except (yaml.YAMLError, ValidationError, AttributeError, TypeError) as e:
        logger.error(f"Failed to load question catalog from {catalog_path}: {e}")
        logger.info("Falling back to default question catalog")
        return list(DEFAULT_QUESTIONS)
