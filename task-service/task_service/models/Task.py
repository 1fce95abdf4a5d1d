from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, ValidationError

from task_service.errors import RecordDecodeError

DEFAULT_STATUS = "Pending"


def stamp(moment: datetime) -> str:
    """Stored timestamp form: UTC, fixed width, so text order is time order."""
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


class Task(BaseModel):
    id: str
    title: str
    description: str = ""
    status: str
    created_at: datetime
    updated_at: datetime

    def to_document(self) -> Dict[str, str]:
        """Flatten into the stored hash layout, keyed by ``_id``."""
        return {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "created_at": stamp(self.created_at),
            "updated_at": stamp(self.updated_at),
        }

    @classmethod
    def from_document(cls, doc: Dict[str, str]) -> "Task":
        try:
            return cls(
                id=doc["_id"],
                title=doc["title"],
                description=doc.get("description", ""),
                status=doc["status"],
                created_at=doc["created_at"],
                updated_at=doc["updated_at"],
            )
        except (KeyError, ValidationError) as exc:
            raise RecordDecodeError(f"undecodable task document: {exc}") from exc
