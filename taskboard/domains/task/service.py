"""Task service: CRUD calls for ``/api/tasks``."""

from typing import Any

from taskboard.core.http import ApiClient
from taskboard.schemas.base import decode, decode_list
from taskboard.schemas.task import TaskCreate, TaskFilter, TaskResponse, TaskUpdate

TASKS_PATH = "/api/tasks/"


def task_path(task_id: int) -> str:
    return f"/api/tasks/{task_id}"


class TaskService:
    """Service class for task API calls."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_tasks(self, filters: TaskFilter | None = None) -> list[TaskResponse]:
        """Get tasks, optionally filtered server-side by status, priority or project."""
        params = filters.to_params() if filters else None
        body = await self.client.get(TASKS_PATH, params=params)
        return decode_list(TaskResponse, body)

    async def get_task(self, task_id: int) -> TaskResponse:
        body = await self.client.get(task_path(task_id))
        return decode(TaskResponse, body)

    async def create_task(self, task_data: TaskCreate) -> TaskResponse:
        body = await self.client.post(
            TASKS_PATH, json=task_data.model_dump(mode="json", exclude_none=True)
        )
        return decode(TaskResponse, body)

    async def update_task(self, task_id: int, task_data: TaskUpdate) -> TaskResponse:
        """Update a task, sending only the fields that were set."""
        body = await self.client.patch(
            task_path(task_id), json=task_data.model_dump(mode="json", exclude_unset=True)
        )
        return decode(TaskResponse, body)

    async def delete_task(self, task_id: int) -> Any:
        return await self.client.delete(task_path(task_id))
