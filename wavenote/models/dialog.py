# models/dialog.py

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from wavenote.models.task import Task

FORM_FIELDS = ("title", "description", "date", "time")


@dataclass
class FormData:
    """Working copy of the task form, kept as raw strings"""
    title: str = ""
    description: str = ""
    date: str = ""
    time: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class DialogState:
    """State of the add/edit task dialog"""
    open: bool = False
    is_editing: bool = False
    task_to_edit: Optional[Task] = None
    form_data: FormData = field(default_factory=FormData)
    error: str = ""
    date_error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "open": self.open,
            "is_editing": self.is_editing,
            "task_to_edit": self.task_to_edit.to_dict() if self.task_to_edit else None,
            "form_data": self.form_data.to_dict(),
            "error": self.error,
            "date_error": self.date_error
        }
