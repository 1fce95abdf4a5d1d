from pydantic import BaseModel, field_validator


class TaskPayload(BaseModel):
    # id, created_at and updated_at are owned by the service; anything
    # else a client sends is ignored.
    title: str = ""
    description: str = ""
    status: str = ""

    @field_validator("title", "description", "status", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value
