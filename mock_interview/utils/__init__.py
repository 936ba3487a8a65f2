"""Utility modules for the Mock Interview system."""

from .logging import setup_logging, get_logger, set_correlation_id, get_correlation_id, log_error
from .exceptions import (
    MockInterviewError,
    ConfigurationError,
    ExtractionError,
    ScoringError,
    LLMProviderError,
    AuthenticationError,
    SessionError,
    StorageError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_correlation_id",
    "get_correlation_id",
    "log_error",
    "MockInterviewError",
    "ConfigurationError",
    "ExtractionError",
    "ScoringError",
    "LLMProviderError",
    "AuthenticationError",
    "SessionError",
    "StorageError",
]
