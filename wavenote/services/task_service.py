# services/task_service.py

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pytz

from wavenote.database import JsonDocumentStore, collection_path
from wavenote.models.task import Task
from wavenote.services.auth_service import AuthSession

logger = logging.getLogger(__name__)

DEFAULT_TASKS_COLLECTION = "to-do-tasks"


class TaskNotFoundError(KeyError):
    def __init__(self, task_id: str):
        super().__init__(task_id)
        self.task_id = task_id


def partition_tasks(tasks: List[Task]) -> Tuple[List[Task], List[Task]]:
    """Split tasks into (uncompleted, completed), keeping their order"""
    uncompleted = [task for task in tasks if not task.completed]
    completed = [task for task in tasks if task.completed]
    return uncompleted, completed


class TaskService:
    """
    Task operations of a signed-in user.

    Every mutation is written to the document store and followed by a full
    re-fetch of the user's tasks into `tasks`. Without a signed-in user all
    operations do nothing and return False.
    """

    def __init__(
        self,
        store: JsonDocumentStore,
        session: AuthSession,
        collection: str = DEFAULT_TASKS_COLLECTION,
        tz=pytz.UTC
    ):
        self.store = store
        self.session = session
        self.collection = collection
        self.tz = tz
        self.tasks: List[Task] = []

    def _tasks_path(self) -> Optional[str]:
        user = self.session.current_user
        if user is None:
            return None
        return collection_path("users", user.uid, self.collection)

    # ===== READ =====

    async def fetch_tasks(self) -> List[Task]:
        """Reload all tasks of the current user"""
        path = self._tasks_path()
        if path is None:
            return self.tasks

        records = await self.store.list(path)
        self.tasks = [Task.from_record(doc_id, data, self.tz) for doc_id, data in records]
        return self.tasks

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.task_id == task_id:
                return task
        return None

    @property
    def uncompleted_tasks(self) -> List[Task]:
        return partition_tasks(self.tasks)[0]

    @property
    def completed_tasks(self) -> List[Task]:
        return partition_tasks(self.tasks)[1]

    # ===== MUTATIONS =====

    async def create(self, title: str, description: str, deadline: datetime) -> bool:
        path = self._tasks_path()
        if path is None:
            return False

        task_id = await self.store.insert(path, {
            "title": title,
            "description": description,
            "deadline": deadline,
            "completed": False
        })
        logger.info(f"✅ Task {task_id} created for user {self.session.current_user.uid}: {title}")

        await self.fetch_tasks()
        return True

    async def update(self, task_id: str, fields: Dict[str, Any]) -> bool:
        """Overwrite the given fields; `completed` is kept unless it is among them"""
        path = self._tasks_path()
        if path is None:
            return False

        await self.store.update(path, task_id, fields)
        logger.info(f"✏️ Task {task_id} updated for user {self.session.current_user.uid}")

        await self.fetch_tasks()
        return True

    async def toggle_completion(self, task_id: str) -> bool:
        path = self._tasks_path()
        if path is None:
            return False

        task = self.find_task(task_id)
        if task is None:
            data = await self.store.get(path, task_id)
            if data is None:
                raise TaskNotFoundError(task_id)
            task = Task.from_record(task_id, data, self.tz)

        record = task.fields()
        record["completed"] = not task.completed
        await self.store.update(path, task_id, record)
        logger.info(f"🔄 Task {task_id} marked {'completed' if record['completed'] else 'uncompleted'}")

        await self.fetch_tasks()
        return True

    async def delete(self, task_id: str) -> bool:
        path = self._tasks_path()
        if path is None:
            return False

        await self.store.delete(path, task_id)
        logger.info(f"🗑️ Task {task_id} deleted for user {self.session.current_user.uid}")

        await self.fetch_tasks()
        return True

    async def duplicate(self, task: Task) -> bool:
        path = self._tasks_path()
        if path is None:
            return False

        new_id = await self.store.insert(path, task.fields())
        logger.info(f"📄 Task {task.task_id} duplicated as {new_id}")

        await self.fetch_tasks()
        return True
