"""Custom exceptions for the Mock Interview system."""

from typing import Optional, Any, Dict


class MockInterviewError(Exception):
    """Base exception for all Mock Interview errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(MockInterviewError):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the configuration error.

        Args:
            message: Error message
            config_key: Optional configuration key that caused the error
            details: Optional additional error details
        """
        super().__init__(message, "CONFIG_ERROR", details)
        self.config_key = config_key


class ExtractionError(MockInterviewError):
    """Raised when a resume document cannot be turned into text."""

    def __init__(self, message: str, file_name: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "EXTRACTION_ERROR", details)
        self.file_name = file_name


class ScoringError(MockInterviewError):
    """Exception raised when an answer could not be scored.

    The session state machine absorbs this error and records the
    scoring-failed sentinel on the attempt.
    """

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the scoring error.

        Args:
            message: Error message
            url: Optional URL of the scoring endpoint
            status_code: Optional HTTP status code returned by the endpoint
            details: Optional additional error details
        """
        super().__init__(message, "SCORING_ERROR", details)
        self.url = url
        self.status_code = status_code


class LLMProviderError(MockInterviewError):
    """Exception raised for LLM provider-related errors."""

    def __init__(self, message: str, provider_name: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the LLM provider error.

        Args:
            message: Error message
            provider_name: Optional name of the LLM provider that caused the error
            details: Optional additional error details
        """
        super().__init__(message, "LLM_PROVIDER_ERROR", details)
        self.provider_name = provider_name


class AuthenticationError(LLMProviderError):
    """Exception raised when the upstream API key is missing or rejected."""

    def __init__(self, message: str, provider_name: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, provider_name, details)
        self.error_code = "AUTHENTICATION_ERROR"


class SessionError(MockInterviewError):
    """Exception raised for session-related errors."""

    def __init__(self, message: str, session_id: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the session error.

        Args:
            message: Error message
            session_id: Optional session ID that caused the error
            details: Optional additional error details
        """
        super().__init__(message, "SESSION_ERROR", details)
        self.session_id = session_id


class StorageError(MockInterviewError):
    """Exception raised for storage-related errors."""

    def __init__(self, message: str, file_path: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the storage error.

        Args:
            message: Error message
            file_path: Optional file path that caused the error
            details: Optional additional error details
        """
        super().__init__(message, "STORAGE_ERROR", details)
        self.file_path = file_path
