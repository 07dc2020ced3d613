"""Exit codes and persisted settings of the bitbucket-client CLI."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from src.bitbucket_client.http import DEFAULT_TIMEOUT


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (config issues, validation failures)
    - CONFLICT (2): The server reported a conflict (409)
    - AUTH_ERROR (3): Authentication or authorization failure
    - NETWORK_ERROR (4): Network connectivity or API availability issues
    - NOT_FOUND (5): Project, repository or webhook does not exist

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFLICT = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4
    NOT_FOUND = 5


@dataclass
class ClientConfig:
    """Connection and scope settings stored in .bitbucket-client/config.yaml.

    Attributes:
        base_url: Bitbucket server root URL (falls back to BITBUCKET_URL)
        project_key: Default project key for repository and webhook commands
        repo_slug: Default repository slug for webhook commands
        timeout: Request timeout in seconds
        retry_rate_limited: Retry 429 responses with exponential backoff

    Example:
        >>> config = ClientConfig(base_url="https://bitbucket.example.com",
        ...                       project_key="PROJ", repo_slug="repo")
    """
    base_url: Optional[str] = None
    project_key: Optional[str] = None
    repo_slug: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    retry_rate_limited: bool = True
