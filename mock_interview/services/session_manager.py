"""Session Manager: owns the session collection and the active interview."""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from ..core.session_machine import SessionStateMachine, TimerFactory
from ..models.interview import ContactInfo, InterviewSession, Question
from ..utils.exceptions import SessionError
from ..utils.logging import get_logger, set_correlation_id
from .storage_manager import StorageManager


class SessionManager:
    """Keeps the in-memory session list in sync with the store.

    The collection is hydrated once and written back whole after every
    committed change. Each session gets one state machine for the life of
    the manager, and at most one of them is active.
    """

    def __init__(
        self,
        storage_manager: StorageManager,
        scoring_service: Any,
        catalog: Optional[Sequence[Question]] = None,
        tick_interval: float = 1.0,
        scoring_timeout: Optional[float] = None,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.storage_manager = storage_manager
        self.scoring_service = scoring_service
        self.catalog = list(catalog) if catalog is not None else None
        self.tick_interval = tick_interval
        self.scoring_timeout = scoring_timeout
        self.timer_factory = timer_factory
        self.logger = get_logger("session_manager")

        self.sessions: List[InterviewSession] = []
        self.active: Optional[SessionStateMachine] = None
        self._machines: Dict[str, SessionStateMachine] = {}
        self._save_lock = asyncio.Lock()
        self._initialized = False

    async def initialize(self) -> None:
        """Load the stored collection. Later calls do nothing."""
        if self._initialized:
            return

        self.storage_manager.initialize()
        self.sessions = await self.storage_manager.load()
        self._initialized = True
        self.logger.info(f"SessionManager initialized with {len(self.sessions)} sessions")

    async def create_session(self, contact: ContactInfo, resume_text: str) -> InterviewSession:
        """Create and persist a new session; newest sessions come first."""
        session = InterviewSession.from_contact(contact, resume_text)
        self.sessions.insert(0, session)
        await self._persist()

        self.logger.info(f"Created session {session.id} for {session.name or 'unknown candidate'}")
        return session

    def get(self, session_id: str) -> Optional[InterviewSession]:
        """Get a session by id."""
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def require(self, session_id: str) -> InterviewSession:
        """Get a session by id or raise ``SessionError``."""
        session = self.get(session_id)
        if session is None:
            raise SessionError(f"Session not found: {session_id}", session_id=session_id)
        return session

    def list_sessions(self) -> List[InterviewSession]:
        """All sessions, newest first."""
        return list(self.sessions)

    def ranked_sessions(self) -> List[InterviewSession]:
        """All sessions by final score, highest first; unfinished count as 0."""
        return sorted(self.sessions, key=lambda s: s.ranking_score(), reverse=True)

    async def delete_session(self, session_id: str) -> bool:
        """Delete a session, closing it first if it is active.

        Returns:
            True if a session was removed.
        """
        session = self.get(session_id)
        if session is None:
            self.logger.warning(f"Cannot delete unknown session {session_id}")
            return False

        if self.active is not None and self.active.session.id == session_id:
            await self.close_session()
        self._machines.pop(session_id, None)

        self.sessions.remove(session)
        await self._persist()
        self.logger.info(f"Deleted session {session_id}")
        return True

    async def open_session(self, session_id: str) -> SessionStateMachine:
        """Activate a session and start its countdown.

        Any other active session is suspended first. A session reopened after
        a suspend gets back its previous machine, including a submission
        that is still being scored.

        Raises:
            SessionError: If the session does not exist or is finished
        """
        session = self.require(session_id)

        if self.active is not None:
            if self.active.session.id == session_id:
                await self.active.activate()
                return self.active
            await self.close_session()

        machine = self._machines.get(session_id)
        if machine is None:
            machine = SessionStateMachine(
                session,
                self.scoring_service,
                catalog=self.catalog,
                on_commit=self._on_commit,
                timer_factory=self.timer_factory,
                tick_interval=self.tick_interval,
                scoring_timeout=self.scoring_timeout,
            )
            self._machines[session_id] = machine
        await machine.activate()
        self.active = machine
        set_correlation_id(session_id)
        return machine

    async def close_session(self) -> None:
        """Suspend the active session, if any."""
        if self.active is None:
            return
        machine, self.active = self.active, None
        await machine.suspend()
        set_correlation_id("")

    async def _on_commit(self, session: InterviewSession) -> None:
        await self._persist()

    async def _persist(self) -> None:
        async with self._save_lock:
            await self.storage_manager.save(list(self.sessions))
