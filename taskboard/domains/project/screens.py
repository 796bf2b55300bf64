"""Project screens: list, detail and the create/edit form."""

import logging
from typing import Any

from taskboard.domains.project.service import ProjectService
from taskboard.domains.task.service import TaskService
from taskboard.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from taskboard.schemas.task import TaskFilter, TaskResponse, TaskStatus
from taskboard.shared.screen import ListScreen, Navigate, Screen, parse_id

logger = logging.getLogger(__name__)

PROJECTS_ROUTE = "/projects"


def group_by_status(tasks: list[TaskResponse]) -> dict[TaskStatus, list[TaskResponse]]:
    """Bucket tasks by status for display, keeping list order within a bucket."""
    groups: dict[TaskStatus, list[TaskResponse]] = {status: [] for status in TaskStatus}
    for task in tasks:
        groups[task.status].append(task)
    return groups


class ProjectListScreen(ListScreen[list[ProjectResponse], ProjectResponse]):
    """All projects, with a confirmed delete."""

    load_error_message = "Failed to load projects"
    delete_error_message = "Failed to delete project"

    def __init__(self, project_service: ProjectService, navigate: Navigate | None = None):
        super().__init__(navigate)
        self.project_service = project_service

    @property
    def projects(self) -> list[ProjectResponse]:
        return self.items

    @property
    def is_empty(self) -> bool:
        return not self.loading and not self.items

    @property
    def confirmation_message(self) -> str | None:
        if self.pending_delete is None:
            return None
        return (
            f'Are you sure you want to delete the project "{self.pending_delete.name}"? '
            "This action cannot be undone and will also delete all tasks associated "
            "with this project."
        )

    async def load(self) -> list[ProjectResponse]:
        return await self.project_service.get_projects()

    def apply(self, result: list[ProjectResponse]) -> None:
        self.items = result

    async def delete_item(self, item_id: int) -> Any:
        return await self.project_service.delete_project(item_id)


class ProjectDetailScreen(Screen[tuple[ProjectResponse, list[TaskResponse]]]):
    """One project and its tasks, grouped by status."""

    load_error_message = "Failed to load project details"

    def __init__(
        self,
        project_service: ProjectService,
        task_service: TaskService,
        project_id: Any,
        navigate: Navigate | None = None,
    ):
        super().__init__(navigate)
        self.project_service = project_service
        self.task_service = task_service
        self.project_id = project_id
        self.project: ProjectResponse | None = None
        self.tasks: list[TaskResponse] = []

    async def load(self) -> tuple[ProjectResponse, list[TaskResponse]]:
        project_id = parse_id(self.project_id)
        project = await self.project_service.get_project(project_id)
        tasks = await self.task_service.get_tasks(TaskFilter(project_id=project_id))
        return project, tasks

    def apply(self, result: tuple[ProjectResponse, list[TaskResponse]]) -> None:
        self.project, self.tasks = result

    def tasks_by_status(self) -> dict[TaskStatus, list[TaskResponse]]:
        return group_by_status(self.tasks)

    def go_back(self) -> None:
        self.navigate(PROJECTS_ROUTE)

    def add_task(self) -> None:
        if self.project is not None:
            self.navigate(f"/tasks/new?project_id={self.project.id}")


class ProjectFormScreen(Screen[ProjectResponse | None]):
    """Create a project, or edit an existing one when ``is_edit`` is set."""

    load_error_message = "Failed to load project data"
    save_error_message = "Failed to save project"

    def __init__(
        self,
        project_service: ProjectService,
        is_edit: bool = False,
        project_id: Any = None,
        navigate: Navigate | None = None,
    ):
        self.is_edit = is_edit
        super().__init__(navigate)
        self.project_service = project_service
        self.project_id = project_id
        self.submitting = False
        self.name = ""
        self.description = ""
        self._original: dict[str, str] = {"name": "", "description": ""}

    @property
    def should_load(self) -> bool:
        return self.is_edit

    @property
    def can_submit(self) -> bool:
        return bool(self.name.strip()) and not self.submitting

    async def load(self) -> ProjectResponse:
        return await self.project_service.get_project(parse_id(self.project_id))

    def apply(self, result: ProjectResponse) -> None:
        self.name = result.name
        self.description = result.description or ""
        self._original = {"name": self.name, "description": self.description}

    def set_field(self, name: str, value: str) -> None:
        if name not in self._original:
            raise AttributeError(f"Unknown project field: {name}")
        setattr(self, name, value)
        self._notify()

    def _changes(self) -> ProjectUpdate:
        changed: dict[str, str | None] = {}
        if self.name != self._original["name"]:
            changed["name"] = self.name
        if self.description != self._original["description"]:
            changed["description"] = self.description or None
        return ProjectUpdate(**changed)

    async def submit(self) -> bool:
        """Save the form and go back to the project list.

        On failure the fields stay as typed and submitting is allowed again.
        """
        if not self.can_submit:
            return False

        self.submitting = True
        self.error = None
        self._notify()
        try:
            if self.is_edit:
                await self.project_service.update_project(
                    parse_id(self.project_id), self._changes()
                )
            else:
                await self.project_service.create_project(
                    ProjectCreate(name=self.name, description=self.description or None)
                )
        except Exception as e:
            logger.error(f"Error saving project: {str(e)}")
            self.error = self.save_error_message
            self.submitting = False
            self._notify()
            return False

        self.navigate(PROJECTS_ROUTE)
        return True

    def cancel(self) -> None:
        self.navigate(PROJECTS_ROUTE)
