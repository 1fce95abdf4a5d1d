from datetime import datetime
from typing import Dict

from pydantic import BaseModel

from task_service.models.Task import stamp
from task_service.models.TaskPayload import TaskPayload


class TaskUpdate(BaseModel):
    """The full set of fields an update rewrites.

    Every field is always written, so a payload that left one out blanks it
    in the stored record.
    """

    title: str
    description: str
    status: str
    updated_at: datetime

    @classmethod
    def from_payload(cls, payload: TaskPayload, updated_at: datetime) -> "TaskUpdate":
        return cls(
            title=payload.title,
            description=payload.description,
            status=payload.status,
            updated_at=updated_at,
        )

    def to_fields(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "updated_at": stamp(self.updated_at),
        }
