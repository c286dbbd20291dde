# services/dialog_controller.py

import logging
from datetime import datetime
from typing import Optional

from wavenote.database import Timestamp
from wavenote.models.dialog import FORM_FIELDS, DialogState, FormData
from wavenote.models.task import Task
from wavenote.services.task_service import TaskService
from wavenote.utils.datetime_utils import combine_date_time, split_deadline
from wavenote.utils.validators import validate_deadline, validate_task_fields

logger = logging.getLogger(__name__)


class DialogController:
    """Add/edit task dialog: form values, validation messages and submission"""

    def __init__(self, task_service: TaskService):
        self.task_service = task_service
        self.state = DialogState()

    def open_for_add(self) -> None:
        self.state = DialogState(open=True)

    def open_for_edit(self, task: Task) -> None:
        deadline = task.deadline
        if isinstance(deadline, Timestamp):
            deadline = deadline.to_datetime(self.task_service.tz)
        date_str, time_str = split_deadline(deadline, self.task_service.tz)

        self.state = DialogState(
            open=True,
            is_editing=True,
            task_to_edit=task,
            form_data=FormData(
                title=task.title,
                description=task.description,
                date=date_str,
                time=time_str
            )
        )

    def close(self) -> None:
        # Form values and messages stay until the dialog is opened again
        self.state.open = False

    def on_field_change(self, name: str, value: str) -> None:
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown form field: {name}")
        setattr(self.state.form_data, name, value)
        if name in ("date", "time"):
            self.state.date_error = ""

    async def submit(self, now: Optional[datetime] = None) -> bool:
        """Validate the form and save the task; returns True when something was written"""
        if not self.task_service.session.is_authenticated:
            return False

        form = self.state.form_data
        tz = self.task_service.tz

        date_error = validate_deadline(form.date, form.time, now=now, tz=tz)
        if date_error:
            self.state.date_error = date_error
            logger.debug(f"Task form rejected: {date_error}")
            return False

        error = validate_task_fields(form.title, form.description)
        if error:
            self.state.error = error
            logger.debug(f"Task form rejected: {error}")
            return False

        deadline = combine_date_time(form.date, form.time, tz)

        if self.state.is_editing:
            existing = self.state.task_to_edit
            await self.task_service.update(existing.task_id, {
                "title": form.title,
                "description": form.description,
                "deadline": deadline,
                "completed": existing.completed
            })
        else:
            await self.task_service.create(form.title, form.description, deadline)

        self.state = DialogState()
        return True
