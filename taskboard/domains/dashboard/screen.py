"""Dashboard screen: overview of projects and tasks."""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from taskboard.domains.project.service import ProjectService
from taskboard.domains.task.service import TaskService
from taskboard.schemas.project import ProjectResponse
from taskboard.schemas.task import TaskResponse, TaskStatus
from taskboard.shared.screen import Navigate, Screen

DEFAULT_DUE_SOON_DAYS = 7
DEFAULT_RECENT_PROJECTS = 5


def utcnow() -> datetime:
    return datetime.now(UTC)


def tasks_due_soon(
    tasks: list[TaskResponse], now: datetime, days: int = DEFAULT_DUE_SOON_DAYS
) -> list[TaskResponse]:
    """Tasks due in ``[now, now + days)``. Tasks without a due date never qualify."""
    window_end = now + timedelta(days=days)
    return [
        task
        for task in tasks
        if task.due_date is not None and now <= task.due_date < window_end
    ]


def count_by_status(tasks: list[TaskResponse]) -> dict[TaskStatus, int]:
    counts = {status: 0 for status in TaskStatus}
    for task in tasks:
        counts[task.status] += 1
    return counts


class DashboardScreen(Screen[tuple[list[ProjectResponse], list[TaskResponse]]]):
    """Counts, upcoming tasks and recent projects, all derived client-side."""

    load_error_message = "Failed to load dashboard data"

    def __init__(
        self,
        project_service: ProjectService,
        task_service: TaskService,
        navigate: Navigate | None = None,
        clock: Callable[[], datetime] = utcnow,
        due_soon_days: int = DEFAULT_DUE_SOON_DAYS,
        recent_projects_limit: int = DEFAULT_RECENT_PROJECTS,
    ):
        super().__init__(navigate)
        self.project_service = project_service
        self.task_service = task_service
        self.clock = clock
        self.due_soon_days = due_soon_days
        self.recent_projects_limit = recent_projects_limit
        self.projects: list[ProjectResponse] = []
        self.tasks: list[TaskResponse] = []

    async def load(self) -> tuple[list[ProjectResponse], list[TaskResponse]]:
        projects, tasks = await asyncio.gather(
            self.project_service.get_projects(),
            self.task_service.get_tasks(),
        )
        return projects, tasks

    def apply(self, result: tuple[list[ProjectResponse], list[TaskResponse]]) -> None:
        self.projects, self.tasks = result

    @property
    def status_counts(self) -> dict[TaskStatus, int]:
        return count_by_status(self.tasks)

    @property
    def tasks_due_soon(self) -> list[TaskResponse]:
        return tasks_due_soon(self.tasks, self.clock(), self.due_soon_days)

    @property
    def recent_projects(self) -> list[ProjectResponse]:
        # Backend order, not re-sorted
        return self.projects[: self.recent_projects_limit]

    @property
    def summary(self) -> str:
        return f"You have {len(self.projects)} projects and {len(self.tasks)} tasks."
