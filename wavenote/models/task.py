# models/task.py

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

import pytz

from wavenote.database.document_store import DocumentStoreError
from wavenote.database.timestamp import Timestamp


@dataclass
class Task:
    """One to-do item"""
    task_id: str
    title: str
    description: str
    deadline: datetime
    completed: bool = False

    def fields(self) -> Dict[str, Any]:
        """Stored fields of the task (everything but the id)"""
        return {
            "title": self.title,
            "description": self.description,
            "deadline": self.deadline,
            "completed": self.completed
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "title": self.title,
            "description": self.description,
            "deadline": self.deadline.isoformat(),
            "completed": self.completed
        }

    @classmethod
    def from_record(cls, doc_id: str, data: Dict[str, Any], tz=pytz.UTC) -> "Task":
        """Build a task from a store document, converting the stored timestamp"""
        deadline = data.get("deadline")
        if isinstance(deadline, Timestamp):
            deadline = deadline.to_datetime(tz)
        elif isinstance(deadline, datetime):
            if deadline.tzinfo is None:
                deadline = pytz.UTC.localize(deadline).astimezone(tz)
        else:
            raise DocumentStoreError(f"Task {doc_id} has no valid deadline: {deadline!r}")
        return cls(
            task_id=doc_id,
            title=data.get("title", ""),
            description=data.get("description", ""),
            deadline=deadline,
            completed=bool(data.get("completed", False))
        )
