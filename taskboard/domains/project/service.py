"""Project service: CRUD calls for ``/api/projects``."""

from typing import Any

from taskboard.core.http import ApiClient
from taskboard.schemas.base import decode, decode_list
from taskboard.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate

PROJECTS_PATH = "/api/projects/"


def project_path(project_id: int) -> str:
    return f"/api/projects/{project_id}"


class ProjectService:
    """Service class for project API calls."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_projects(self) -> list[ProjectResponse]:
        """Get all projects, in the order the backend returns them."""
        body = await self.client.get(PROJECTS_PATH)
        return decode_list(ProjectResponse, body)

    async def get_project(self, project_id: int) -> ProjectResponse:
        body = await self.client.get(project_path(project_id))
        return decode(ProjectResponse, body)

    async def create_project(self, project_data: ProjectCreate) -> ProjectResponse:
        body = await self.client.post(
            PROJECTS_PATH, json=project_data.model_dump(mode="json", exclude_none=True)
        )
        return decode(ProjectResponse, body)

    async def update_project(
        self, project_id: int, project_data: ProjectUpdate
    ) -> ProjectResponse:
        """Update a project, sending only the fields that were set."""
        body = await self.client.patch(
            project_path(project_id),
            json=project_data.model_dump(mode="json", exclude_unset=True),
        )
        return decode(ProjectResponse, body)

    async def delete_project(self, project_id: int) -> Any:
        """Delete a project.

        Returns the backend's acknowledgement body as-is. Tasks that belonged
        to the project are not assumed to be gone.
        """
        return await self.client.delete(project_path(project_id))
