"""Factory for resource clients sharing one server connection."""

import logging
from typing import Optional

from .auth import ANONYMOUS_CREDENTIALS, Authenticator, Credentials
from .http import DEFAULT_TIMEOUT, RequestExecutor, RequestsExecutor
from .pagination import RetryPolicy
from .project_client import ProjectClient
from .repository_client import RepositoryClient
from .request_executor import BitbucketRequestExecutor, sanitize
from .webhook_client import WebhookClient

logger = logging.getLogger(__name__)


class BitbucketClientFactory:
    """Creates resource clients bound to one Bitbucket server and credential.

    The underlying transport and request executor are created lazily on first
    use and then shared by every client the factory hands out.

    Example:
        >>> factory = BitbucketClientFactory.from_environment(Authenticator())
        >>> hooks = factory.webhook_client('PROJ', 'repo').get_webhooks()
    """

    def __init__(
        self,
        base_url: str,
        credentials: Credentials = ANONYMOUS_CREDENTIALS,
        request_executor: Optional[RequestExecutor] = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry: Optional[RetryPolicy] = None,
    ):
        """Initialize the factory.

        Args:
            base_url: Bitbucket server root URL
            credentials: Credential policy for every request
            request_executor: Transport to use (defaults to a RequestsExecutor)
            timeout: Timeout in seconds for the default transport
            retry: Policy wrapped around every page request of client streams,
                e.g. retry_on_rate_limit
        """
        self.base_url = base_url
        self._credentials = credentials
        self._transport = request_executor
        self._timeout = timeout
        self._retry = retry
        self._executor: Optional[BitbucketRequestExecutor] = None

    @classmethod
    def from_environment(
        cls,
        authenticator: Authenticator,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> 'BitbucketClientFactory':
        """Build a factory from BITBUCKET_* environment settings.

        Raises:
            InvalidCredentialsError: If settings are missing or incomplete
        """
        return cls(
            base_url=authenticator.get_base_url(),
            credentials=authenticator.get_credentials(),
            timeout=timeout,
        )

    def _get_executor(self) -> BitbucketRequestExecutor:
        if self._executor is None:
            if self._transport is None:
                self._transport = RequestsExecutor(timeout=self._timeout)
            logger.debug(
                f"Connecting to {sanitize(self.base_url)} "
                f"as {type(self._credentials).__name__}"
            )
            self._executor = BitbucketRequestExecutor(
                self.base_url, self._transport, self._credentials
            )
        return self._executor

    def project_client(self) -> ProjectClient:
        return ProjectClient(self._get_executor(), self._retry)

    def repository_client(self, project_key: str) -> RepositoryClient:
        return RepositoryClient(project_key, self._get_executor(), self._retry)

    def webhook_client(self, project_key: str, repo_slug: str) -> WebhookClient:
        return WebhookClient(project_key, repo_slug, self._get_executor(), self._retry)
