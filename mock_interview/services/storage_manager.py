"""Storage Manager for persisting the session collection."""

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from ..models.interview import InterviewSession
from ..utils.exceptions import StorageError
from ..utils.logging import get_logger

# Key under which the whole session array is stored
STORAGE_KEY = "sessions"


class StorageInterface:
    """Abstract interface for storage operations.

    The store is a plain key-value stand-in: the whole collection is read
    on load and replaced on save.
    """

    def initialize(self) -> None:
        """Prepare the backing storage."""
        raise NotImplementedError

    async def load(self) -> List[InterviewSession]:
        """Load every stored session."""
        raise NotImplementedError

    async def save(self, sessions: List[InterviewSession]) -> None:
        """Replace the stored collection."""
        raise NotImplementedError


def _dump_sessions(sessions: List[InterviewSession]) -> str:
    payload = {STORAGE_KEY: [s.model_dump(mode="json", by_alias=True) for s in sessions]}
    return json.dumps(payload, indent=2)


def _parse_sessions(content: str) -> List[InterviewSession]:
    data = json.loads(content)
    records = data.get(STORAGE_KEY, []) if isinstance(data, dict) else data
    return [InterviewSession.model_validate(record) for record in records]


class FileSessionStore(StorageInterface):
    """File-based session store holding one JSON document."""

    def __init__(self, base_path: str = "data", file_name: str = "sessions.json",
                 backup_enabled: bool = True, max_backup_count: int = 10):
        """Initialize the file session store.

        Args:
            base_path: Base directory for storing data files.
            file_name: Name of the JSON document inside ``base_path``.
            backup_enabled: Copy the previous document aside before each overwrite.
            max_backup_count: Number of backups to keep.
        """
        self.base_path = Path(base_path)
        self.file_path = self.base_path / file_name
        self.backup_path = self.base_path / "backups"
        self.backup_enabled = backup_enabled
        self.max_backup_count = max_backup_count
        self.logger = get_logger("storage_manager")

    def initialize(self) -> None:
        """Create the storage directories."""
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            if self.backup_enabled:
                self.backup_path.mkdir(parents=True, exist_ok=True)
            self.logger.info(f"FileSessionStore initialized at {self.file_path}")
        except OSError as e:
            self.logger.error(f"Failed to initialize FileSessionStore: {str(e)}")
            raise StorageError(f"Storage initialization failed: {str(e)}", file_path=str(self.base_path))

    async def load(self) -> List[InterviewSession]:
        """Load every session from the JSON document.

        Returns:
            Stored sessions in stored order. A missing or unreadable
            document yields an empty list.
        """
        if not self.file_path.exists():
            self.logger.info(f"No session file at {self.file_path}, starting empty")
            return []

        try:
            async with aiofiles.open(self.file_path, "r", encoding="utf-8") as f:
                content = await f.read()
            sessions = _parse_sessions(content)
        except (OSError, json.JSONDecodeError, ValidationError, AttributeError, TypeError) as e:
            self.logger.error(f"Failed to load sessions from {self.file_path}: {str(e)}; starting empty")
            return []

        self.logger.info(f"Loaded {len(sessions)} sessions")
        return sessions

    async def save(self, sessions: List[InterviewSession]) -> None:
        """Replace the JSON document with the given sessions.

        Raises:
            StorageError: If the document cannot be written.
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            if self.backup_enabled and self.file_path.exists():
                await self._backup_file(self.file_path)

            async with aiofiles.open(self.file_path, "w", encoding="utf-8") as f:
                await f.write(_dump_sessions(sessions))

            self.logger.debug(f"Saved {len(sessions)} sessions")

        except OSError as e:
            self.logger.error(f"Failed to save sessions: {str(e)}")
            raise StorageError(f"Session save failed: {str(e)}", file_path=str(self.file_path))

    async def _backup_file(self, file_path: Path) -> None:
        """Copy a file into the backup directory and prune old copies."""
        try:
            self.backup_path.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            backup_file = self.backup_path / f"{file_path.stem}_{timestamp}{file_path.suffix}"

            async with aiofiles.open(file_path, "r", encoding="utf-8") as src:
                content = await src.read()
            async with aiofiles.open(backup_file, "w", encoding="utf-8") as dst:
                await dst.write(content)

            self.logger.debug(f"Created backup of {file_path.name}")
            await self._cleanup_old_backups()

        except OSError as e:
            self.logger.warning(f"Failed to create backup of {file_path.name}: {str(e)}")

    async def _cleanup_old_backups(self) -> None:
        """Remove backups beyond ``max_backup_count``, oldest first."""
        backups = sorted(self.backup_path.glob(f"{self.file_path.stem}_*"), key=lambda p: p.name, reverse=True)
        for old_backup in backups[self.max_backup_count:]:
            await aiofiles.os.remove(old_backup)
            self.logger.debug(f"Removed old backup: {old_backup.name}")


class MemorySessionStore(StorageInterface):
    """In-memory store that keeps the serialized document as a string."""

    def __init__(self, content: Optional[str] = None):
        self.content = content
        self.save_count = 0
        self.logger = get_logger("storage_manager")

    def initialize(self) -> None:
        pass

    async def load(self) -> List[InterviewSession]:
        if not self.content:
            return []
        try:
            return _parse_sessions(self.content)
        except (json.JSONDecodeError, ValidationError, AttributeError, TypeError) as e:
            self.logger.error(f"Failed to load sessions from memory: {str(e)}; starting empty")
            return []

    async def save(self, sessions: List[InterviewSession]) -> None:
        self.content = _dump_sessions(sessions)
        self.save_count += 1


class StorageManager:
    """Main storage manager that provides a unified interface."""

    def __init__(self, storage_type: str = "file", **kwargs):
        """Initialize the storage manager.

        Args:
            storage_type: ``"file"`` or ``"memory"``.
            **kwargs: Additional configuration parameters for the store.
        """
        self.storage_type = storage_type
        self.logger = get_logger("storage_manager")

        if storage_type == "file":
            self.storage_interface: StorageInterface = FileSessionStore(**kwargs)
        elif storage_type == "memory":
            self.storage_interface = MemorySessionStore(**kwargs)
        else:
            raise StorageError(f"Unsupported storage type: {storage_type}")

    @classmethod
    def from_config(cls, storage_config) -> "StorageManager":
        """Build a file-backed manager from a ``StorageConfig`` section."""
        return cls(
            "file",
            base_path=storage_config.base_path,
            file_name=storage_config.file_name,
            backup_enabled=storage_config.backup_enabled,
            max_backup_count=storage_config.max_backup_count,
        )

    def initialize(self) -> None:
        """Initialize the underlying store."""
        self.storage_interface.initialize()

    async def load(self) -> List[InterviewSession]:
        """Load every stored session."""
        return await self.storage_interface.load()

    async def save(self, sessions: List[InterviewSession]) -> None:
        """Replace the stored collection."""
        await self.storage_interface.save(sessions)
