# database/timestamp.py

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict

import pytz

EPOCH = datetime(1970, 1, 1, tzinfo=pytz.UTC)


@dataclass(frozen=True, order=True)
class Timestamp:
    """Store-native point in time: seconds and nanoseconds since the Unix epoch (UTC)"""
    seconds: int
    nanoseconds: int = 0

    @classmethod
    def from_datetime(cls, value: datetime) -> "Timestamp":
        if value.tzinfo is None:
            value = pytz.UTC.localize(value)
        delta = value - EPOCH
        micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
        seconds, micros = divmod(micros, 1_000_000)
        return cls(seconds=seconds, nanoseconds=micros * 1000)

    def to_datetime(self, tz=pytz.UTC) -> datetime:
        value = EPOCH + timedelta(seconds=self.seconds, microseconds=self.nanoseconds // 1000)
        return value.astimezone(tz)

    def to_dict(self) -> Dict[str, Any]:
        return {"__type__": "timestamp", "seconds": self.seconds, "nanoseconds": self.nanoseconds}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Timestamp":
        return cls(seconds=int(data["seconds"]), nanoseconds=int(data.get("nanoseconds", 0)))

    @staticmethod
    def is_encoded(data: Any) -> bool:
        return isinstance(data, dict) and data.get("__type__") == "timestamp"
