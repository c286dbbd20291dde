# services/dashboard.py

import logging
import secrets
import time
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

import pytz

from wavenote.database import JsonDocumentStore
from wavenote.models.task import Task
from wavenote.models.user import User
from wavenote.services.auth_service import AuthSession
from wavenote.services.dialog_controller import DialogController
from wavenote.services.task_service import DEFAULT_TASKS_COLLECTION, TaskService

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000
DEFAULT_IDLE_TIMEOUT = 60 * 60


class Dashboard:
    """Task lists and task dialog of one browser session"""

    def __init__(self, session: AuthSession, task_service: TaskService):
        self.session = session
        self.task_service = task_service
        self.dialog = DialogController(task_service)
        self._unsubscribe: Optional[Callable[[], None]] = None

    async def mount(self) -> None:
        """Start following the session's user; tasks are loaded whenever one signs in"""
        if self._unsubscribe is None:
            self._unsubscribe = await self.session.on_auth_state_changed(self._on_auth_state_changed)

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_auth_state_changed(self, user: Optional[User]) -> None:
        if user:
            await self.task_service.fetch_tasks()
        else:
            logger.info("No user logged in.")

    @property
    def tasks(self) -> List[Task]:
        return self.task_service.tasks

    @property
    def uncompleted_tasks(self) -> List[Task]:
        return self.task_service.uncompleted_tasks

    @property
    def completed_tasks(self) -> List[Task]:
        return self.task_service.completed_tasks


class SessionRegistry:
    """
    In-memory map of browser session id -> auth session and dashboard.

    The map is bounded: sessions idle for longer than `idle_timeout` seconds
    are dropped, and once `max_sessions` is reached the least recently used
    session is dropped. A dropped signed-in session is restored from its
    cookie on the next request; its dialog state starts over.
    """

    def __init__(
        self,
        store: JsonDocumentStore,
        collection: str = DEFAULT_TASKS_COLLECTION,
        tz=pytz.UTC,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic
    ):
        self.store = store
        self.collection = collection
        self.tz = tz
        self.max_sessions = max_sessions
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._sessions: "OrderedDict[str, AuthSession]" = OrderedDict()
        self._last_seen: Dict[str, float] = {}
        self._dashboards: Dict[str, Dashboard] = {}

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(24)

    def get_session(self, session_id: str) -> AuthSession:
        now = self._clock()
        self._expire_idle(now)

        session = self._sessions.get(session_id)
        if session is None:
            while len(self._sessions) >= self.max_sessions:
                oldest = next(iter(self._sessions))
                logger.debug(f"Session {oldest} evicted, registry is full")
                self.drop(oldest)
            session = AuthSession(session_id)
            self._sessions[session_id] = session
        else:
            self._sessions.move_to_end(session_id)

        self._last_seen[session_id] = now
        return session

    async def get_dashboard(self, session_id: str) -> Dashboard:
        session = self.get_session(session_id)
        dashboard = self._dashboards.get(session_id)
        if dashboard is None:
            task_service = TaskService(self.store, session, collection=self.collection, tz=self.tz)
            dashboard = Dashboard(session, task_service)
            self._dashboards[session_id] = dashboard
            await dashboard.mount()
        return dashboard

    def drop(self, session_id: str) -> None:
        dashboard = self._dashboards.pop(session_id, None)
        if dashboard is not None:
            dashboard.dispose()
        self._sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)

    def _expire_idle(self, now: float) -> None:
        # Least recently used first
        for session_id in list(self._sessions):
            if now - self._last_seen.get(session_id, now) <= self.idle_timeout:
                break
            logger.debug(f"Session {session_id} expired after {self.idle_timeout:.0f}s idle")
            self.drop(session_id)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
