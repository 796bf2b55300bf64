"""
Test data factories for generating API payloads.

This module provides Factory Boy factories for the JSON records the backend
returns, plus helpers that seed the fake backend with them.
"""

from datetime import datetime, timedelta

import factory

from tests.fake_backend import FakeBackend


class ProjectPayloadFactory(factory.DictFactory):
    """Factory for project records as the backend sends them."""

    id = factory.Sequence(lambda n: n + 1)
    name = factory.Sequence(lambda n: f"Test Project {n}")
    description = factory.Faker("sentence", nb_words=8)


class TaskPayloadFactory(factory.DictFactory):
    """Factory for task records as the backend sends them."""

    id = factory.Sequence(lambda n: n + 1)
    title = factory.Sequence(lambda n: f"Test Task {n}")
    description = factory.Faker("sentence", nb_words=10)
    status = factory.Iterator(["TODO", "IN_PROGRESS", "DONE"])
    priority = factory.Iterator(["LOW", "MEDIUM", "HIGH"])
    project_id = None
    due_date = None
    assigned_user_id = None


def seed_project_with_tasks(
    backend: FakeBackend, num_tasks: int = 3, **project_kwargs
) -> tuple[dict, list[dict]]:
    """Create a project holding ``num_tasks`` tasks."""
    payload = ProjectPayloadFactory(**project_kwargs)
    payload.pop("id")
    project = backend.add_project(**payload)

    tasks = []
    for _ in range(num_tasks):
        task_payload = TaskPayloadFactory(project_id=project["id"])
        task_payload.pop("id")
        tasks.append(backend.add_task(**task_payload))
    return project, tasks


def seed_mixed_status_tasks(backend: FakeBackend, now: datetime) -> dict[str, dict]:
    """Create tasks covering every status and the edges of the due-soon window."""
    return {
        "todo": backend.add_task("Todo task", status="TODO"),
        "in_progress": backend.add_task(
            "Due tomorrow", status="IN_PROGRESS", due_date=(now + timedelta(days=1)).isoformat()
        ),
        "done": backend.add_task(
            "Due right now", status="DONE", due_date=now.isoformat()
        ),
        "overdue": backend.add_task(
            "Overdue", status="TODO", due_date=(now - timedelta(seconds=1)).isoformat()
        ),
        "window_end": backend.add_task(
            "Due in exactly a week", status="TODO", due_date=(now + timedelta(days=7)).isoformat()
        ),
        "just_inside": backend.add_task(
            "Due in a week minus a second",
            status="IN_PROGRESS",
            due_date=(now + timedelta(days=7, seconds=-1)).isoformat(),
        ),
    }
