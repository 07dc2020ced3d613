"""Project lookups."""

from typing import Iterator, Optional

from src.models.project import Project

from .pagination import RetryPolicy, fetch_all
from .request_executor import BitbucketRequestExecutor


class ProjectClient:
    """Reads projects visible to the configured credentials."""

    def __init__(self, request_executor: BitbucketRequestExecutor, retry: Optional[RetryPolicy] = None):
        self._request_executor = request_executor
        self._retry = retry

    def get_project(self, project_key: str) -> Project:
        """Fetch a project by key.

        Raises:
            NotFoundError: If the project does not exist or is not visible
        """
        return self._request_executor.get(
            self._request_executor.build_url('projects', project_key),
            Project.from_json,
        )

    def get_projects(self, name: Optional[str] = None) -> Iterator[Project]:
        """Stream visible projects, optionally filtered by name.

        Args:
            name: Case-insensitive name fragment matched by the server
        """
        url = self._request_executor.build_url('projects', params={'name': name})
        return fetch_all(self._request_executor, url, Project.from_json, self._retry)
