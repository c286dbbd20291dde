# models/__init__.py

from .dialog import (
    FORM_FIELDS,
    DialogState,
    FormData
)

from .task import Task

from .user import (
    AuthError,
    User
)

__all__ = [
    # Task models
    'Task',

    # Dialog models
    'FORM_FIELDS',
    'DialogState',
    'FormData',

    # User models
    'AuthError',
    'User'
]
