from typing import Optional

from pydantic import BaseModel, field_validator, model_validator


class TaskCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def require_title(self):
        if not self.title:
            raise ValueError("Title is required")
        if self.description is None:
            self.description = ""
        return self
