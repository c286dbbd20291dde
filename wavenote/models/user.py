# models/user.py

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class User:
    uid: str
    email: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "email": self.email,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }


class AuthError(Exception):
    """Authentication failure; `message` is shown to the user as is"""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
