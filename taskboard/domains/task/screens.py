"""Task screens: list, detail and the create/edit form."""

import asyncio
import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from taskboard.domains.project.screens import group_by_status
from taskboard.domains.project.service import ProjectService
from taskboard.domains.task.service import TaskService
from taskboard.schemas.project import ProjectResponse
from taskboard.schemas.task import (
    TaskCreate,
    TaskFilter,
    TaskPriority,
    TaskResponse,
    TaskStatus,
    TaskUpdate,
)
from taskboard.shared.screen import ListScreen, Navigate, Screen, parse_id

logger = logging.getLogger(__name__)

TASKS_ROUTE = "/tasks"
UNKNOWN_PROJECT = "Unknown Project"

TASK_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "project_id",
    "due_date",
    "assigned_user_id",
)


def filter_from_query(query: dict[str, str]) -> TaskFilter:
    """Build list filters from ``?status=&priority=&project_id=``, ignoring bad values."""
    values = {k: query[k] for k in ("status", "priority", "project_id") if query.get(k)}
    try:
        return TaskFilter(**values)
    except ValidationError:
        logger.warning(f"Ignoring invalid task filters: {values}")
        return TaskFilter()


class TaskListScreen(ListScreen[tuple[list[TaskResponse], list[ProjectResponse]], TaskResponse]):
    """
    Tasks filtered server-side by status, priority and project.

    Changing a filter refetches immediately. Overlapping refetches are not
    sequenced: whichever response arrives last is what the list shows.
    """

    load_error_message = "Failed to load tasks"
    delete_error_message = "Failed to delete task"

    def __init__(
        self,
        task_service: TaskService,
        project_service: ProjectService,
        navigate: Navigate | None = None,
        filters: TaskFilter | None = None,
    ):
        super().__init__(navigate)
        self.task_service = task_service
        self.project_service = project_service
        self.projects: list[ProjectResponse] = []
        self.filters = filters or TaskFilter()

    @property
    def tasks(self) -> list[TaskResponse]:
        return self.items

    @property
    def confirmation_message(self) -> str | None:
        if self.pending_delete is None:
            return None
        return (
            f'Are you sure you want to delete "{self.pending_delete.title}"? '
            "This cannot be undone."
        )

    async def load(self) -> tuple[list[TaskResponse], list[ProjectResponse]]:
        tasks, projects = await asyncio.gather(
            self.task_service.get_tasks(self.filters),
            self.project_service.get_projects(),
        )
        return tasks, projects

    def apply(self, result: tuple[list[TaskResponse], list[ProjectResponse]]) -> None:
        self.items, self.projects = result

    async def set_filter(
        self,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
        project_id: int | str | None = None,
    ) -> None:
        """Replace the filters (empty values clear one) and refetch."""
        self.filters = TaskFilter(
            status=status or None,
            priority=priority or None,
            project_id=project_id or None,
        )
        await self.refresh()

    def project_name(self, project_id: int | None) -> str:
        for project in self.projects:
            if project.id == project_id:
                return project.name
        return UNKNOWN_PROJECT

    def tasks_by_status(self) -> dict[TaskStatus, list[TaskResponse]]:
        return group_by_status(self.items)

    async def delete_item(self, item_id: int) -> Any:
        return await self.task_service.delete_task(item_id)


class TaskDetailScreen(Screen[tuple[TaskResponse, ProjectResponse | None]]):
    """One task, plus the project it points at when it has one."""

    load_error_message = "Failed to load task details"
    delete_error_message = "Failed to delete task"

    def __init__(
        self,
        task_service: TaskService,
        project_service: ProjectService,
        task_id: Any,
        navigate: Navigate | None = None,
    ):
        super().__init__(navigate)
        self.task_service = task_service
        self.project_service = project_service
        self.task_id = task_id
        self.task: TaskResponse | None = None
        self.project: ProjectResponse | None = None
        self.confirming_delete = False

    async def load(self) -> tuple[TaskResponse, ProjectResponse | None]:
        task = await self.task_service.get_task(parse_id(self.task_id))
        project = None
        if task.project_id:
            project = await self.project_service.get_project(task.project_id)
        return task, project

    def apply(self, result: tuple[TaskResponse, ProjectResponse | None]) -> None:
        self.task, self.project = result

    @property
    def project_name(self) -> str | None:
        if self.task is None or self.task.project_id is None:
            return None
        return self.project.name if self.project else UNKNOWN_PROJECT

    def request_delete(self) -> None:
        if self.task is not None:
            self.confirming_delete = True
            self._notify()

    def cancel_delete(self) -> None:
        self.confirming_delete = False
        self._notify()

    async def confirm_delete(self) -> bool:
        """Delete the task and return to the list."""
        if not self.confirming_delete or self.task is None:
            return False
        self.confirming_delete = False
        try:
            await self.task_service.delete_task(self.task.id)
        except Exception as e:
            logger.error(f"Error deleting task: {str(e)}")
            if self.mounted:
                self.error = self.delete_error_message
                self._notify()
            return False
        self.navigate(TASKS_ROUTE)
        return True

    def edit(self) -> None:
        if self.task is not None:
            self.navigate(f"/tasks/edit/{self.task.id}")

    def go_back(self) -> None:
        self.navigate(TASKS_ROUTE)


class TaskFormScreen(Screen[tuple[list[ProjectResponse], TaskResponse | None]]):
    """
    Create a task, or edit an existing one when ``is_edit`` is set.

    The project list is always fetched to fill the project choice. A new task
    starts as TODO / MEDIUM, optionally attached to ``initial_project_id``
    (passed as ``?project_id=`` when coming from a project page).
    """

    load_error_message = "Failed to load data"
    save_error_message = "Failed to save task"

    def __init__(
        self,
        task_service: TaskService,
        project_service: ProjectService,
        is_edit: bool = False,
        task_id: Any = None,
        initial_project_id: Any = None,
        navigate: Navigate | None = None,
    ):
        self.is_edit = is_edit
        super().__init__(navigate)
        self.task_service = task_service
        self.project_service = project_service
        self.task_id = task_id
        self.submitting = False
        self.projects: list[ProjectResponse] = []

        self.title = ""
        self.description = ""
        self.status = TaskStatus.TODO
        self.priority = TaskPriority.MEDIUM
        self.project_id: int | None = (
            int(initial_project_id) if str(initial_project_id or "").isdigit() else None
        )
        self.due_date: datetime | None = None
        self.assigned_user_id: int | None = None
        self._original = self._snapshot()

    def _snapshot(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in TASK_FIELDS}

    @property
    def can_submit(self) -> bool:
        return bool(self.title.strip()) and not self.submitting

    async def load(self) -> tuple[list[ProjectResponse], TaskResponse | None]:
        projects = await self.project_service.get_projects()
        task = None
        if self.is_edit:
            task = await self.task_service.get_task(parse_id(self.task_id))
        return projects, task

    def apply(self, result: tuple[list[ProjectResponse], TaskResponse | None]) -> None:
        self.projects, task = result
        if task is not None:
            self.title = task.title
            self.description = task.description or ""
            self.status = task.status
            self.priority = task.priority
            self.project_id = task.project_id
            self.due_date = task.due_date
            self.assigned_user_id = task.assigned_user_id
            self._original = self._snapshot()

    def set_field(self, name: str, value: Any) -> None:
        if name not in TASK_FIELDS:
            raise AttributeError(f"Unknown task field: {name}")
        if name == "status" and value is not None:
            value = TaskStatus(value)
        elif name == "priority" and value is not None:
            value = TaskPriority(value)
        elif name in ("project_id", "assigned_user_id"):
            value = int(value) if value not in (None, "") else None
        setattr(self, name, value)
        self._notify()

    def _payload(self) -> dict[str, Any]:
        values = self._snapshot()
        values["description"] = values["description"] or None
        return values

    def _changes(self) -> TaskUpdate:
        current = self._payload()
        original = dict(self._original, description=self._original["description"] or None)
        return TaskUpdate(**{k: v for k, v in current.items() if v != original[k]})

    async def submit(self) -> bool:
        """Save the form and go to the task list.

        On failure the fields stay as typed and submitting is allowed again.
        """
        if not self.can_submit:
            return False

        self.submitting = True
        self.error = None
        self._notify()
        try:
            if self.is_edit:
                await self.task_service.update_task(parse_id(self.task_id), self._changes())
            else:
                await self.task_service.create_task(TaskCreate(**self._payload()))
        except Exception as e:
            logger.error(f"Error saving task: {str(e)}")
            self.error = self.save_error_message
            self.submitting = False
            self._notify()
            return False

        self.navigate(TASKS_ROUTE)
        return True

    def cancel(self) -> None:
        self.navigate(TASKS_ROUTE)
