from typing import Any, Optional

from pydantic import BaseModel, field_validator

from taskservice.models.Task import STATUSES


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[Any] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        if value is not None and not value:
            raise ValueError("Title is required")
        return value

    # only runs when the key is sent, so an explicit null is rejected too
    @field_validator("status")
    @classmethod
    def known_status(cls, value):
        if not isinstance(value, str) or value not in STATUSES:
            raise ValueError("Invalid status value")
        return value

    def changes(self) -> dict:
        # a null title or description means "leave unchanged"
        return {k: v for k, v in self.model_dump().items() if v is not None}
