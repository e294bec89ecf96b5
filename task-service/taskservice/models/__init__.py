from taskservice.models.Task import DEFAULT_STATUS, STATUSES, Status, Task
from taskservice.models.TaskCreate import TaskCreate
from taskservice.models.TaskUpdate import TaskUpdate
from taskservice.models.Messages import HealthResponse, MessageResponse

__all__ = [
    "DEFAULT_STATUS",
    "STATUSES",
    "Status",
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "HealthResponse",
    "MessageResponse",
]
