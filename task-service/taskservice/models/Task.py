from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel

Status = Literal["Pending", "Completed"]
STATUSES = get_args(Status)
DEFAULT_STATUS: Status = "Pending"


class Task(BaseModel):
    id: str
    title: str
    description: str = ""
    status: Status = DEFAULT_STATUS
    createdAt: datetime
