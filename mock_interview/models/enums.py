"""Enumeration types for the Mock Interview system."""

from enum import Enum


class DifficultyLevel(Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def _missing_(cls, value):
        """Handle enum names and mixed-case values during deserialization."""
        if isinstance(value, str):
            # Handle cases like "DifficultyLevel.EASY", "EASY" or "Easy"
            if value.startswith("DifficultyLevel."):
                value = value.split(".", 1)[1]
            try:
                return cls[value.upper()]
            except KeyError:
                pass
        return None


class SessionStatus(Enum):
    """Interview session status.

    Transitions are one-directional: CREATED -> IN_PROGRESS -> FINISHED.
    """

    CREATED = "created"
    IN_PROGRESS = "in-progress"
    FINISHED = "finished"

    @classmethod
    def _missing_(cls, value):
        """Handle enum names during deserialization."""
        if isinstance(value, str):
            # Handle cases like "SessionStatus.FINISHED", "IN_PROGRESS" or "in_progress"
            if value.startswith("SessionStatus."):
                value = value.split(".", 1)[1]
            try:
                return cls[value.upper().replace("-", "_")]
            except KeyError:
                pass
        return None
