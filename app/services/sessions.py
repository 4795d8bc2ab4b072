"""In-process registry of dashboard sessions.

Sessions live only as long as the process; view state is never persisted.
Idle sessions expire after a TTL so abandoned browser tabs do not pile up.
"""
import time
import uuid
from datetime import timedelta
from typing import Callable, Dict, Optional

from app.core.config import settings
from app.core.logging import get_logger
from app.domain.student import RecordSet
from app.services.dashboard import DashboardController

logger = get_logger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session id has no live dashboard controller."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(session_id)

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


class SessionRegistry:
    """Maps session ids to their dashboard controllers, with an idle TTL.

    Example:
        >>> registry = SessionRegistry(load_records, ttl_minutes=30)
        >>> session_id = registry.create()
        >>> registry.get(session_id).set_search_text("ann")
    """

    def __init__(
        self,
        records_provider: Callable[[], RecordSet],
        ttl_minutes: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the registry.

        Args:
            records_provider: Returns the loaded roster for new sessions
            ttl_minutes: Idle time before a session expires (default from SESSION_TTL_MINUTES)
            clock: Seconds source, monotonic by default
        """
        self.records_provider = records_provider
        minutes = ttl_minutes if ttl_minutes is not None else settings.session_ttl_minutes
        self.ttl = timedelta(minutes=minutes)
        self.clock = clock
        self._sessions: Dict[str, DashboardController] = {}
        self._last_access: Dict[str, float] = {}

        logger.info(f"SessionRegistry initialized with {minutes} minute TTL")

    def _expire_idle(self) -> None:
        cutoff = self.clock() - self.ttl.total_seconds()
        expired = [sid for sid, seen in self._last_access.items() if seen <= cutoff]
        for session_id in expired:
            del self._sessions[session_id]
            del self._last_access[session_id]
            logger.debug(f"Session expired: {session_id}", extra={"session_id": session_id})

    def create(self) -> str:
        self._expire_idle()
        session_id = str(uuid.uuid4())
        self._sessions[session_id] = DashboardController(
            self.records_provider(), session_id=session_id
        )
        self._last_access[session_id] = self.clock()
        logger.info(f"Session created: {session_id}", extra={"session_id": session_id})
        return session_id

    def get(self, session_id: str) -> DashboardController:
        """Get a session's controller and refresh its TTL.

        Raises:
            SessionNotFoundError: If the session does not exist or has expired
        """
        self._expire_idle()
        try:
            controller = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        self._last_access[session_id] = self.clock()
        return controller

    def delete(self, session_id: str) -> bool:
        """Drop a session. Returns False if it did not exist."""
        self._expire_idle()
        removed = self._sessions.pop(session_id, None)
        if removed is None:
            logger.debug(f"Session not found for deletion: {session_id}")
            return False
        del self._last_access[session_id]
        logger.debug(f"Session deleted: {session_id}")
        return True

    def __len__(self) -> int:
        self._expire_idle()
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        self._expire_idle()
        return session_id in self._sessions
