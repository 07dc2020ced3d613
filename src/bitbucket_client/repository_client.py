"""Repository lookups within one project."""

from typing import Iterator, Optional

from src.models.project import Repository

from .pagination import RetryPolicy, fetch_all
from .request_executor import BitbucketRequestExecutor


class RepositoryClient:
    """Reads the repositories of a single project."""

    def __init__(
        self,
        project_key: str,
        request_executor: BitbucketRequestExecutor,
        retry: Optional[RetryPolicy] = None,
    ):
        self.project_key = project_key
        self._request_executor = request_executor
        self._retry = retry

    def get_repository(self, repo_slug: str) -> Repository:
        """Fetch a repository by slug.

        Raises:
            NotFoundError: If the project or repository does not exist
        """
        return self._request_executor.get(
            self._request_executor.build_url('projects', self.project_key, 'repos', repo_slug),
            Repository.from_json,
        )

    def get_repositories(self) -> Iterator[Repository]:
        """Stream all repositories of the project."""
        url = self._request_executor.build_url('projects', self.project_key, 'repos')
        return fetch_all(self._request_executor, url, Repository.from_json, self._retry)
