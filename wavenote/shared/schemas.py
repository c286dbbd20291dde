from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


# Accounts
class Credentials(BaseModel):
    email: str = ""
    password: str = ""


class UserOut(BaseModel):
    uid: str
    email: str
    created_at: Optional[datetime] = None


class SessionOut(BaseModel):
    authenticated: bool
    user: Optional[UserOut] = None


# Tasks
class TaskOut(BaseModel):
    task_id: str
    title: str
    description: str
    deadline: datetime
    completed: bool


class TaskListsOut(BaseModel):
    uncompleted: List[TaskOut] = []
    completed: List[TaskOut] = []


# Dialog
class FormDataOut(BaseModel):
    title: str = ""
    description: str = ""
    date: str = ""
    time: str = ""


class DialogOut(BaseModel):
    open: bool
    is_editing: bool
    task_to_edit: Optional[TaskOut] = None
    form_data: FormDataOut
    error: str = ""
    date_error: str = ""


class FieldChange(BaseModel):
    name: Literal["title", "description", "date", "time"]
    value: str = Field(default="")


class SubmitResult(BaseModel):
    saved: bool
    dialog: DialogOut
    tasks: TaskListsOut


class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    services: Dict[str, Any] = {}
