# services/__init__.py

"""
WaveNote services

Authentication, task operations and the per-session dashboard state.
"""

import logging
from typing import Optional

from wavenote.config import DashboardSettings
from wavenote.database import JsonDocumentStore

from .auth_service import AuthService, AuthSession
from .dashboard import Dashboard, SessionRegistry
from .dialog_controller import DialogController
from .task_service import TaskNotFoundError, TaskService, partition_tasks

logger = logging.getLogger(__name__)


class ServiceManager:
    """
    Wires the services of the web application together

    - one document store for accounts and tasks
    - one authentication service
    - one registry of browser sessions
    """

    def __init__(self, settings: DashboardSettings):
        self.settings = settings
        self.store: Optional[JsonDocumentStore] = None
        self.auth_service: Optional[AuthService] = None
        self.sessions: Optional[SessionRegistry] = None
        self.initialized = False

    def initialize_services(self) -> None:
        logger.info("🔧 Initializing WaveNote services...")

        self.store = JsonDocumentStore(self.settings.DATA_DIR)
        self.auth_service = AuthService(self.store, min_password_length=self.settings.MIN_PASSWORD_LENGTH)
        self.sessions = SessionRegistry(
            self.store,
            collection=self.settings.TASKS_COLLECTION,
            tz=self.settings.tzinfo,
            max_sessions=self.settings.MAX_SESSIONS,
            idle_timeout=self.settings.SESSION_IDLE_TIMEOUT
        )

        self.initialized = True
        logger.info(f"✅ Services initialized, data directory: {self.settings.DATA_DIR}")

    def get_services_info(self) -> dict:
        return {
            "initialized": self.initialized,
            "data_dir": str(self.settings.DATA_DIR),
            "active_sessions": len(self.sessions) if self.sessions else 0,
            "store_operations": self.store.total_operations if self.store else 0
        }


__all__ = [
    'AuthService',
    'AuthSession',
    'Dashboard',
    'DialogController',
    'ServiceManager',
    'SessionRegistry',
    'TaskNotFoundError',
    'TaskService',
    'partition_tasks'
]
