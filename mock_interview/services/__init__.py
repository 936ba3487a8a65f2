"""Services package for configuration, storage, scoring and sessions."""

from .configuration_manager import AppConfig, ConfigurationManager
from .scoring_client import ScoringClient
from .session_manager import SessionManager
from .storage_manager import FileSessionStore, MemorySessionStore, StorageManager

__all__ = [
    "AppConfig",
    "ConfigurationManager",
    "ScoringClient",
    "SessionManager",
    "FileSessionStore",
    "MemorySessionStore",
    "StorageManager",
]
