"""Client-side task state: the fetched list plus filter, search and form state.

The board never filters on the server. ``visible_tasks`` is recomputed from
the full in-memory list, and every successful mutation re-fetches that list
instead of patching it locally.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from taskclient.api import Task, TaskApi, TaskApiError

log = logging.getLogger(__name__)

FILTERS = ("All", "Pending", "Completed")

FETCH_FAILED = "Failed to fetch tasks. Please check if the server is running."
SAVE_FAILED = "Failed to save task"
DELETE_FAILED = "Failed to delete task"
TOGGLE_FAILED = "Failed to update task status"


@dataclass
class TaskForm:
    title: str = ""
    description: str = ""


class TaskBoard:
    def __init__(self, api: TaskApi):
        self.api = api
        self.tasks: List[Task] = []
        self.search_term = ""
        self.filter_status = "All"
        self.form = TaskForm()
        self.editing: Optional[Task] = None
        self.error = ""
        self.loading = False

    def refresh(self) -> bool:
        self.loading = True
        try:
            self.tasks = self.api.list_tasks()
            self.error = ""
            return True
        except TaskApiError as exc:
            log.warning("Error fetching tasks: %s", exc)
            self.error = FETCH_FAILED
            return False
        finally:
            self.loading = False

    def set_filter(self, status: str) -> None:
        if status not in FILTERS:
            raise ValueError(f"filter must be one of {', '.join(FILTERS)}")
        self.filter_status = status

    def set_search(self, term: str) -> None:
        self.search_term = term

    def visible_tasks(self) -> List[Task]:
        visible = self.tasks
        if self.filter_status != "All":
            visible = [t for t in visible if t.status == self.filter_status]
        if self.search_term:
            needle = self.search_term.lower()
            visible = [t for t in visible if needle in t.title.lower() or needle in t.description.lower()]
        return visible

    def counts(self) -> Dict[str, int]:
        pending = sum(1 for t in self.tasks if t.status == "Pending")
        completed = sum(1 for t in self.tasks if t.status == "Completed")
        return {"Pending": pending, "Completed": completed, "Total": len(self.tasks)}

    def start_edit(self, task: Task) -> None:
        self.editing = task
        self.form = TaskForm(title=task.title, description=task.description)

    def cancel_edit(self) -> None:
        self.editing = None
        self.form = TaskForm()
        self.error = ""

    def submit(self) -> bool:
        if not self.form.title.strip():
            self.error = "Title is required"
            return False
        self.loading = True
        try:
            if self.editing is not None:
                self.api.update_task(self.editing.id, title=self.form.title, description=self.form.description)
            else:
                self.api.create_task(self.form.title, self.form.description)
        except TaskApiError as exc:
            log.warning("Error saving task: %s", exc)
            self.error = exc.server_message or SAVE_FAILED
            return False
        finally:
            self.loading = False
        self.form = TaskForm()
        self.editing = None
        self.error = ""
        self.refresh()
        return True

    def delete(self, task_id: str, confirm: Callable[[], bool]) -> bool:
        if not confirm():
            return False
        self.loading = True
        try:
            self.api.delete_task(task_id)
        except TaskApiError as exc:
            log.warning("Error deleting task: %s", exc)
            self.error = DELETE_FAILED
            return False
        finally:
            self.loading = False
        self.error = ""
        self.refresh()
        return True

    def toggle_status(self, task: Task) -> bool:
        new_status = "Completed" if task.status == "Pending" else "Pending"
        try:
            self.api.update_task(task.id, status=new_status)
        except TaskApiError as exc:
            log.warning("Error updating status: %s", exc)
            self.error = TOGGLE_FAILED
            return False
        self.refresh()
        return True

    def dismiss_error(self) -> None:
        self.error = ""
